import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models

import agency.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="CustomUser",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("username", models.CharField(max_length=150, unique=True, verbose_name="usuario")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email")),
                ("first_name", models.CharField(blank=True, max_length=100, verbose_name="nombre")),
                ("last_name", models.CharField(blank=True, max_length=100, verbose_name="apellidos")),
                ("category", models.CharField(blank=True, default="General", max_length=20, verbose_name="categoría")),
                ("is_admin", models.BooleanField(default=False, verbose_name="administrador")),
                ("is_director", models.BooleanField(default=False, verbose_name="director")),
                ("is_treasurer", models.BooleanField(default=False, verbose_name="tesorero")),
                ("is_agent", models.BooleanField(default=False, verbose_name="agente")),
                ("is_scout", models.BooleanField(default=False, verbose_name="scout")),
                ("is_active", models.BooleanField(default=True, verbose_name="activo")),
                ("is_staff", models.BooleanField(default=False, verbose_name="acceso al admin")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="fecha de alta")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "verbose_name": "usuario",
                "verbose_name_plural": "usuarios",
            },
            managers=[
                ("objects", agency.models.CustomUserManager()),
            ],
        ),
        migrations.CreateModel(
            name="Player",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("first_name", models.CharField(blank=True, max_length=100, verbose_name="nombre")),
                ("last_name1", models.CharField(blank=True, max_length=100, verbose_name="primer apellido")),
                ("last_name2", models.CharField(blank=True, max_length=100, verbose_name="segundo apellido")),
                ("name", models.CharField(blank=True, max_length=200, verbose_name="nombre visible")),
                ("nationality", models.CharField(blank=True, max_length=100, verbose_name="nacionalidad")),
                ("birth_date", models.DateField(blank=True, null=True, verbose_name="fecha de nacimiento")),
                ("club", models.CharField(blank=True, max_length=150, verbose_name="club")),
                ("league", models.CharField(blank=True, max_length=100, verbose_name="liga")),
                ("position", models.CharField(blank=True, max_length=50, verbose_name="posición")),
                ("preferred_foot", models.CharField(blank=True, max_length=20, verbose_name="pierna hábil")),
                ("category", models.CharField(choices=[("Fútbol", "Fútbol"), ("F. Sala", "Fútbol Sala"), ("Femenino", "Femenino"), ("Entrenadores", "Entrenadores")], default="Fútbol", max_length=20, verbose_name="deporte")),
                ("is_scouting", models.BooleanField(db_index=True, default=False, verbose_name="en seguimiento")),
                ("monitoring_agent", models.CharField(blank=True, max_length=100, verbose_name="agente de seguimiento")),
                ("contract", models.JSONField(blank=True, default=dict, verbose_name="contrato")),
                ("contract_history", models.JSONField(blank=True, default=list, verbose_name="histórico de contratos")),
                ("agency_contract_date", models.DateField(blank=True, null=True, verbose_name="fecha contrato agencia")),
                ("agency_end_date", models.DateField(blank=True, null=True, verbose_name="fin contrato agencia")),
                ("commission_pct", models.DecimalField(decimal_places=2, default=0, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)], verbose_name="comisión %")),
                ("payer_type", models.CharField(choices=[("Club", "Club"), ("Jugador", "Jugador"), ("Ambos", "Ambos")], default="Club", max_length=10, verbose_name="pagador")),
                ("sports_brand", models.CharField(blank=True, max_length=100, verbose_name="marca")),
                ("sports_brand_end_date", models.CharField(blank=True, max_length=50, verbose_name="fin marca")),
                ("scouting", models.JSONField(blank=True, null=True, verbose_name="datos de scouting")),
                ("contract_years", models.JSONField(blank=True, default=list, verbose_name="temporadas de facturación")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="creado")),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="actualizado")),
            ],
            options={
                "verbose_name": "jugador",
                "verbose_name_plural": "jugadores",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("payment_due", "Cobro pendiente"), ("clause_notice", "Cláusula opcional"), ("birthday", "Cumpleaños"), ("contract_signed", "Contrato firmado"), ("general", "General")], default="general", max_length=30, verbose_name="tipo")),
                ("title", models.CharField(max_length=255, verbose_name="título")),
                ("message", models.TextField(verbose_name="mensaje")),
                ("is_read", models.BooleanField(default=False, verbose_name="leído")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="enviado")),
                ("read_at", models.DateTimeField(blank=True, null=True, verbose_name="leído el")),
                ("recipient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL, verbose_name="destinatario")),
                ("related_player", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="notifications", to="agency.player", verbose_name="jugador relacionado")),
            ],
            options={
                "verbose_name": "aviso",
                "verbose_name_plural": "avisos",
                "ordering": ["-created_at"],
            },
        ),
    ]
