"""Constants and reference data.

Note: the program list is configuration, not logic. Keep it here so the form,
the validators and the seed data agree on the same values.
"""

CARRERAS = (
    "Administración Industrial",
    "Contabilidad",
    "Electrotecnia Industrial",
    "Electrónica Industrial",
    "Mecánica Automotriz",
    "Mecánica de Mantenimiento",
    "Mecatrónica Industrial",
    "Construcción Civil",
    "Computación e Informática",
    "Confección Industrial",
)

SEMESTRE_MIN = 1
SEMESTRE_MAX = 6

DNI_PATTERN = r"^[0-9]{8}$"
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

GENERIC_SAVE_ERROR_STUDENT = "Error al guardar el estudiante"
GENERIC_SAVE_ERROR_ATTENDANCE = "Error al guardar el registro de asistencia"
GENERIC_DELETE_ERROR_STUDENT = "Error al eliminar el estudiante"
GENERIC_DELETE_ERROR_ATTENDANCE = "Error al eliminar el registro"
GENERIC_LOAD_ERROR = "Error al cargar los datos"
