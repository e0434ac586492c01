"""
admin.py
─────────────────────────────────────────────────────────────────────
Panel de administración: usuarios con roles, cartera de jugadores
(firmados y en seguimiento) y avisos.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils import timezone
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import CustomUser, Notification, Player, Role

# ── Site branding ────────────────────────────────────────────────────
admin.site.site_header  = _("Proneo Sports · Gestión de Agencia")
admin.site.site_title   = _("Panel de administración")
admin.site.index_title  = _("Inicio")


# ════════════════════════════════════════════════════════════════════
#  CustomUser Admin
# ════════════════════════════════════════════════════════════════════

ROLE_COLORS = {
    Role.ADMIN:     "#dc3545",
    Role.DIRECTOR:  "#007bff",
    Role.TREASURER: "#28a745",
    Role.AGENT:     "#fd7e14",
    Role.SCOUT:     "#6f42c1",
}


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display    = ("username", "full_name", "category", "role_badges", "is_active")
    list_filter     = ("is_active", "is_staff", "is_admin", "is_director",
                       "is_treasurer", "is_agent", "is_scout", "category")
    search_fields   = ("username", "first_name", "last_name", "email")
    ordering        = ("username",)

    fieldsets = (
        (_("Acceso"),          {"fields": ("username", "password")}),
        (_("Datos personales"), {"fields": ("first_name", "last_name", "email", "category")}),
        (_("Roles"),           {"fields": ("is_admin", "is_director", "is_treasurer",
                                           "is_agent", "is_scout")}),
        (_("Permisos"),        {"fields": ("is_active", "is_staff", "is_superuser",
                                           "groups", "user_permissions")}),
        (_("Fechas"),          {"fields": ("date_joined", "last_login")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": (
            "username", "first_name", "last_name", "category", "password1", "password2",
        )}),
    )

    def full_name(self, obj):
        return obj.get_full_name()
    full_name.short_description = _("Nombre")

    def role_badges(self, obj):
        badges = "".join(
            f'<span style="background:{ROLE_COLORS.get(r, "#999")};color:#fff;'
            f'padding:2px 7px;border-radius:4px;margin:1px;font-size:11px">'
            f'{Role(r).label}</span>'
            for r in obj.get_roles()
        )
        return format_html(badges or "-")
    role_badges.short_description = _("Roles")


# ════════════════════════════════════════════════════════════════════
#  Player Admin
# ════════════════════════════════════════════════════════════════════

class ScoutingFilter(admin.SimpleListFilter):
    title          = _("Tipo")
    parameter_name = "scouting"

    def lookups(self, request, model_admin):
        return [
            ("signed",   _("Firmados")),
            ("scouting", _("En seguimiento")),
        ]

    def queryset(self, request, queryset):
        if self.value() == "signed":
            return queryset.filter(is_scouting=False)
        if self.value() == "scouting":
            return queryset.filter(is_scouting=True)
        return queryset


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    list_display    = (
        "full_name", "category", "club", "position",
        "agency_end_date", "commission_pct", "type_badge",
    )
    list_filter     = (ScoutingFilter, "category", "payer_type", "agency_end_date")
    search_fields   = ("first_name", "last_name1", "last_name2", "name", "club", "league")
    readonly_fields = ("id", "created_at", "updated_at", "contract_history")
    list_per_page   = 30
    save_on_top     = True

    fieldsets = (
        (_("Identidad"),     {"fields": ("id", "first_name", "last_name1", "last_name2", "name",
                                         "nationality", "birth_date")}),
        (_("Deportivo"),     {"fields": ("category", "club", "league", "position",
                                         "preferred_foot", "is_scouting", "monitoring_agent")}),
        (_("Contrato club"), {"fields": ("contract", "contract_history"),
                              "classes": ("collapse",)}),
        (_("Agencia"),       {"fields": ("agency_contract_date", "agency_end_date",
                                         "commission_pct", "payer_type")}),
        (_("Marca"),         {"fields": ("sports_brand", "sports_brand_end_date"),
                              "classes": ("collapse",)}),
        (_("Scouting"),      {"fields": ("scouting",), "classes": ("collapse",)}),
        (_("Facturación"),   {"fields": ("contract_years",)}),
        (_("Fechas"),        {"fields": ("created_at", "updated_at")}),
    )

    actions = ["sign_selected"]

    def full_name(self, obj):
        return obj.to_record().full_name
    full_name.short_description = _("Nombre")

    def type_badge(self, obj):
        color, label = ("#6f42c1", "Seguimiento") if obj.is_scouting else ("#28a745", "Firmado")
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 7px;border-radius:4px">{}</span>',
            color, label,
        )
    type_badge.short_description = _("Tipo")

    @admin.action(description=_("Firmar jugadores seleccionados"))
    def sign_selected(self, request, queryset):
        # save() per row so the contract-signed alert fires
        count = 0
        for player in queryset.filter(is_scouting=True):
            player.is_scouting = False
            player.save()
            count += 1
        self.message_user(request, f"{count} jugador(es) firmados.")


# ════════════════════════════════════════════════════════════════════
#  Notification Admin
# ════════════════════════════════════════════════════════════════════

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display  = ("title", "recipient", "type", "is_read", "created_at")
    list_filter   = ("type", "is_read")
    search_fields = ("title", "message", "recipient__username")
    raw_id_fields = ("recipient", "related_player")
    actions       = ["mark_read"]

    @admin.action(description=_("Marcar como leídos"))
    def mark_read(self, request, queryset):
        updated = queryset.filter(is_read=False).update(is_read=True, read_at=timezone.now())
        self.message_user(request, f"{updated} aviso(s) marcados como leídos.")
