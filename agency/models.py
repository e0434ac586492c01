"""
Back office de la agencia deportiva
models.py - users with role flags, roster documents and notifications
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MaxValueValidator, MinValueValidator
from django.utils.translation import gettext_lazy as _
from django.utils import timezone

from .services.roster import (
    AgencyLink, Category, ContractTerms, PayerType, PlayerRecord, ScoutingInfo,
)
from .services.ledger import dump_contract_years, load_stored_contract_years


# ─────────────────────────────────────────────
#  Roles
# ─────────────────────────────────────────────
class Role(models.TextChoices):
    ADMIN     = 'admin',    _('Administrador')
    DIRECTOR  = 'director', _('Director')
    TREASURER = 'tesorero', _('Tesorero')
    AGENT     = 'agente',   _('Agente')
    SCOUT     = 'scout',    _('Scout')


class CustomUserManager(BaseUserManager):
    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError(_('El nombre de usuario es obligatorio.'))
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_admin', True)
        return self.create_user(username, password, **extra_fields)


# ─────────────────────────────────────────────
#  Custom User (Multi-Role RBAC)
# ─────────────────────────────────────────────
class CustomUser(AbstractBaseUser, PermissionsMixin):
    """
    Usuario del back office. Puede tener varios roles a la vez; la
    categoría limita las alertas deportivas que recibe ("General" = todas).
    """
    id          = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username    = models.CharField(_('usuario'), max_length=150, unique=True)
    email       = models.EmailField(_('email'), blank=True)
    first_name  = models.CharField(_('nombre'), max_length=100, blank=True)
    last_name   = models.CharField(_('apellidos'), max_length=100, blank=True)
    category    = models.CharField(_('categoría'), max_length=20, blank=True, default='General')

    # ── Multi-role booleans ──────────────────
    is_admin     = models.BooleanField(_('administrador'), default=False)
    is_director  = models.BooleanField(_('director'), default=False)
    is_treasurer = models.BooleanField(_('tesorero'), default=False)
    is_agent     = models.BooleanField(_('agente'), default=False)
    is_scout     = models.BooleanField(_('scout'), default=False)

    is_active   = models.BooleanField(_('activo'), default=True)
    is_staff    = models.BooleanField(_('acceso al admin'), default=False)
    date_joined = models.DateTimeField(_('fecha de alta'), default=timezone.now)

    objects = CustomUserManager()

    USERNAME_FIELD  = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name        = _('usuario')
        verbose_name_plural = _('usuarios')

    def __str__(self):
        name = f'{self.first_name} {self.last_name}'.strip()
        return f'{name} ({self.username})' if name else self.username

    def get_full_name(self):
        name = f'{self.first_name} {self.last_name}'.strip()
        return name or self.username

    def get_short_name(self):
        return self.first_name or self.username

    def get_roles(self):
        roles = []
        if self.is_admin:     roles.append(Role.ADMIN)
        if self.is_director:  roles.append(Role.DIRECTOR)
        if self.is_treasurer: roles.append(Role.TREASURER)
        if self.is_agent:     roles.append(Role.AGENT)
        if self.is_scout:     roles.append(Role.SCOUT)
        return roles

    def has_role(self, role: str) -> bool:
        return role in self.get_roles()


# ─────────────────────────────────────────────
#  Player (signed players and scouting prospects)
# ─────────────────────────────────────────────
class Player(models.Model):
    """
    Documento de jugador. Contrato, histórico, datos de scouting y
    temporadas de facturación se guardan como JSON; la lista
    contract_years se reemplaza completa en cada actualización.
    """
    id          = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # ── Identidad ────────────────────────────
    first_name  = models.CharField(_('nombre'), max_length=100, blank=True)
    last_name1  = models.CharField(_('primer apellido'), max_length=100, blank=True)
    last_name2  = models.CharField(_('segundo apellido'), max_length=100, blank=True)
    name        = models.CharField(_('nombre visible'), max_length=200, blank=True)
    nationality = models.CharField(_('nacionalidad'), max_length=100, blank=True)
    birth_date  = models.DateField(_('fecha de nacimiento'), null=True, blank=True)

    # ── Situación deportiva ──────────────────
    club           = models.CharField(_('club'), max_length=150, blank=True)
    league         = models.CharField(_('liga'), max_length=100, blank=True)
    position       = models.CharField(_('posición'), max_length=50, blank=True)
    preferred_foot = models.CharField(_('pierna hábil'), max_length=20, blank=True)
    category       = models.CharField(_('deporte'), max_length=20,
                                      choices=Category.choices, default=Category.FOOTBALL)
    is_scouting      = models.BooleanField(_('en seguimiento'), default=False, db_index=True)
    monitoring_agent = models.CharField(_('agente de seguimiento'), max_length=100, blank=True)

    # ── Contrato con el club ─────────────────
    contract         = models.JSONField(_('contrato'), default=dict, blank=True)
    contract_history = models.JSONField(_('histórico de contratos'), default=list, blank=True)

    # ── Vínculo con la agencia ───────────────
    agency_contract_date = models.DateField(_('fecha contrato agencia'), null=True, blank=True)
    agency_end_date      = models.DateField(_('fin contrato agencia'), null=True, blank=True)
    commission_pct       = models.DecimalField(
        _('comisión %'), max_digits=5, decimal_places=2, default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    payer_type = models.CharField(_('pagador'), max_length=10,
                                  choices=PayerType.choices, default=PayerType.CLUB)

    # ── Marca ────────────────────────────────
    sports_brand          = models.CharField(_('marca'), max_length=100, blank=True)
    sports_brand_end_date = models.CharField(_('fin marca'), max_length=50, blank=True)

    scouting       = models.JSONField(_('datos de scouting'), null=True, blank=True)
    contract_years = models.JSONField(_('temporadas de facturación'), default=list, blank=True)

    created_at = models.DateTimeField(_('creado'), default=timezone.now)
    updated_at = models.DateTimeField(_('actualizado'), default=timezone.now)

    class Meta:
        verbose_name        = _('jugador')
        verbose_name_plural = _('jugadores')
        ordering            = ['-created_at']

    def __str__(self):
        return self.name or f'{self.first_name} {self.last_name1}'.strip() or str(self.pk)

    # ── Record conversion ────────────────────
    def to_record(self) -> PlayerRecord:
        return PlayerRecord(
            id=str(self.pk),
            first_name=self.first_name,
            last_name1=self.last_name1,
            last_name2=self.last_name2,
            name=self.name,
            nationality=self.nationality,
            birth_date=self.birth_date,
            club=self.club,
            league=self.league,
            position=self.position,
            preferred_foot=self.preferred_foot,
            category=self.category,
            is_scouting=self.is_scouting,
            monitoring_agent=self.monitoring_agent,
            contract=ContractTerms.from_dict(self.contract),
            contract_history=self.contract_history or [],
            agency=AgencyLink(
                contract_date=self.agency_contract_date,
                agency_end_date=self.agency_end_date,
                commission_pct=self.commission_pct,
                payer_type=self.payer_type,
            ),
            sports_brand=self.sports_brand,
            sports_brand_end_date=self.sports_brand_end_date,
            scouting=ScoutingInfo.from_dict(self.scouting),
            contract_years=load_stored_contract_years(self.contract_years),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def apply_record(self, record: PlayerRecord):
        """Copy every persisted field from ``record`` (pk excluded)."""
        self.first_name           = record.first_name
        self.last_name1           = record.last_name1
        self.last_name2           = record.last_name2
        self.name                 = record.name
        self.nationality          = record.nationality
        self.birth_date           = record.birth_date
        self.club                 = record.club
        self.league               = record.league
        self.position             = record.position
        self.preferred_foot       = record.preferred_foot
        self.category             = record.category.value
        self.is_scouting          = record.is_scouting
        self.monitoring_agent     = record.monitoring_agent
        self.contract             = record.contract.to_dict()
        self.contract_history     = [c.to_dict() for c in record.contract_history]
        self.agency_contract_date = record.agency.contract_date
        self.agency_end_date      = record.agency.agency_end_date
        self.commission_pct       = record.agency.commission_pct
        self.payer_type           = record.agency.payer_type.value
        self.sports_brand          = record.sports_brand
        self.sports_brand_end_date = record.sports_brand_end_date
        self.scouting             = record.scouting.to_dict() if record.scouting else None
        self.contract_years       = dump_contract_years(record.contract_years)
        if record.created_at:
            self.created_at = record.created_at
        self.updated_at = record.updated_at or timezone.now()


# ─────────────────────────────────────────────
#  Notification
# ─────────────────────────────────────────────
class Notification(models.Model):
    """
    Aviso interno para un usuario.
    Ejemplos: cobro vencido, cláusula opcional próxima, cumpleaños.
    """

    class NotificationType(models.TextChoices):
        PAYMENT_DUE     = 'payment_due',     _('Cobro pendiente')
        CLAUSE_NOTICE   = 'clause_notice',   _('Cláusula opcional')
        BIRTHDAY        = 'birthday',        _('Cumpleaños')
        CONTRACT_SIGNED = 'contract_signed', _('Contrato firmado')
        GENERAL         = 'general',         _('General')

    recipient   = models.ForeignKey(
        CustomUser, on_delete=models.CASCADE,
        related_name='notifications', verbose_name=_('destinatario')
    )
    type        = models.CharField(_('tipo'), max_length=30, choices=NotificationType.choices, default=NotificationType.GENERAL)
    title       = models.CharField(_('título'), max_length=255)
    message     = models.TextField(_('mensaje'))
    is_read     = models.BooleanField(_('leído'), default=False)
    related_player = models.ForeignKey(
        Player, on_delete=models.SET_NULL, null=True, blank=True,
        related_name='notifications', verbose_name=_('jugador relacionado')
    )
    created_at  = models.DateTimeField(_('enviado'), auto_now_add=True)
    read_at     = models.DateTimeField(_('leído el'), null=True, blank=True)

    class Meta:
        verbose_name        = _('aviso')
        verbose_name_plural = _('avisos')
        ordering            = ['-created_at']

    def __str__(self):
        return f'{self.recipient}: {self.title}'

    def mark_as_read(self):
        self.is_read = True
        self.read_at = timezone.now()
        self.save(update_fields=['is_read', 'read_at'])
