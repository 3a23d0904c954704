"""
Translation tables for the coaching UI.

Pure lookup from language code to UI strings. Keys are shared across
languages; a missing key in one language is a bug, caught by the tests.
"""

DEFAULT_LANGUAGE = "fr"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "fr": {
        # General
        "loading": "Chargement de l'application...",
        "logout": "Déconnexion",
        "back": "Retour",
        "init_error": "Impossible d'initialiser l'application.",
        # Login
        "login_title": "Mon Programme",
        "login_subtitle": "Connectez-vous pour commencer",
        "username_placeholder": "Nom d'utilisateur",
        "password_placeholder": "Mot de passe",
        "login_button": "Connexion",
        "login_error": "Nom d'utilisateur ou mot de passe incorrect.",
        # Dashboard
        "welcome": "Bienvenue",
        "coach_notes": "Notes du Coach",
        "my_progression": "Ma Progression",
        # Session
        "warmup": "Échauffement",
        "session_saved": "Séance enregistrée !",
        "exercise_not_found": "Détails pour \"{name}\" non trouvés dans la bibliothèque.",
        # Admin
        "admin_title": "Tableau de Bord Coach",
        "quit": "Quitter",
        "add_student_title": "Ajouter un élève",
        "full_name_placeholder": "Nom complet",
        "add_student_button": "Ajouter l'élève",
        "student_list_title": "Liste des élèves",
        "progression_button": "Progression",
        "history_button": "Historique",
        "manage_program_button": "Gérer Prog.",
        "notes_for_student": "Notes pour l'élève",
        "save_changes": "Enregistrer les modifications",
        "weight_tracking_button": "Suivi Poids",
        "lexicon_button": "Bibliothèque d'Exercices",
        "recent_activity": "Activité Récente",
        "no_recent_activity": "Aucune activité récente.",
        # History
        "history_of": "Historique de",
        "no_history": "Aucun historique d'entraînement pour cet élève.",
        # Progression
        "progression_of": "Progression de",
        "choose_exercise": "Choisir un exercice :",
        "select_exercise": "-- Sélectionnez un exercice --",
        "max_weight_lifted": "Poids max soulevé (kg) pour",
        # Weight Tracking
        "weight_tracking_of": "Suivi du poids de",
        "add_weight_entry": "Ajouter une pesée",
        "weight_in_kg": "Poids (kg)",
        "add": "Ajouter",
        "weight_history": "Historique des pesées",
    },
    "en": {
        # General
        "loading": "Loading application...",
        "logout": "Logout",
        "back": "Back",
        "init_error": "The application could not be initialized.",
        # Login
        "login_title": "My Program",
        "login_subtitle": "Login to get started",
        "username_placeholder": "Username",
        "password_placeholder": "Password",
        "login_button": "Login",
        "login_error": "Incorrect username or password.",
        # Dashboard
        "welcome": "Welcome",
        "coach_notes": "Coach's Notes",
        "my_progression": "My Progression",
        # Session
        "warmup": "Warm-up",
        "session_saved": "Session saved!",
        "exercise_not_found": "Details for \"{name}\" not found in the library.",
        # Admin
        "admin_title": "Coach Dashboard",
        "quit": "Quit",
        "add_student_title": "Add a student",
        "full_name_placeholder": "Full Name",
        "add_student_button": "Add Student",
        "student_list_title": "Student List",
        "progression_button": "Progression",
        "history_button": "History",
        "manage_program_button": "Manage Prog.",
        "notes_for_student": "Notes for the student",
        "save_changes": "Save Changes",
        "weight_tracking_button": "Weight Tracking",
        "lexicon_button": "Exercise Library",
        "recent_activity": "Recent Activity",
        "no_recent_activity": "No recent activity.",
        # History
        "history_of": "History of",
        "no_history": "No training history for this student.",
        # Progression
        "progression_of": "Progression of",
        "choose_exercise": "Choose an exercise:",
        "select_exercise": "-- Select an exercise --",
        "max_weight_lifted": "Max weight lifted (kg) for",
        # Weight Tracking
        "weight_tracking_of": "Weight Tracking for",
        "add_weight_entry": "Add a weight entry",
        "weight_in_kg": "Weight (kg)",
        "add": "Add",
        "weight_history": "Weight History",
    },
}

SUPPORTED_LANGUAGES = tuple(TRANSLATIONS)


def get_translations(language: str) -> dict[str, str]:
    """Return the string table for a language code."""
    try:
        return TRANSLATIONS[language]
    except KeyError:
        raise ValueError(
            f"Unsupported language '{language}'. "
            f"Expected one of: {', '.join(SUPPORTED_LANGUAGES)}"
        ) from None
