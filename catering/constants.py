# CATERING/backend/catering/constants.py

# Constantes pour l'application
MONTHS_SHORT = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"
]

DEFAULT_EVENT_STATUS = "planned"

# Catégories créées au premier démarrage si la table est vide
DEFAULT_CATEGORIES = [
    "Food", "Staff", "Decoration", "Transport", "Rentals", "Venue", "Miscellaneous"
]
UNCATEGORIZED = "Other"

# Types de fichiers acceptés pour les reçus
RECEIPT_CONTENT_TYPES = ("image/", "application/pdf")
RECEIPT_EXTENSIONS = (".pdf", ".png", ".jpg", ".jpeg", ".gif", ".webp", ".heic")

# Seuils et limites
RECENT_EXPENSES_LIMIT = 10
