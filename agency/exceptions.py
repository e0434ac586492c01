"""
exceptions.py
─────────────────────────────────────────────────────────────────────
Error kinds raised by the service layer.

    validation → LedgerValidationError  (bad status / type / range)
    not found  → PlayerNotFound, ContractYearNotFound
    I/O        → StoreError             (store create/update/delete failed)

Views catch AgencyError and report the message verbatim to the user.
"""


class AgencyError(Exception):
    """Base class for every agency back-office error."""


class LedgerValidationError(AgencyError, ValueError):
    pass


class PlayerNotFound(AgencyError, LookupError):
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__(f"Jugador no encontrado: {player_id}")


class ContractYearNotFound(AgencyError, LookupError):
    def __init__(self, player_id, year_id):
        self.player_id = player_id
        self.year_id   = year_id
        super().__init__(f"Temporada {year_id} no encontrada para el jugador {player_id}")


class StoreError(AgencyError, RuntimeError):
    """The player store rejected a create/update/delete call."""
