"""
Demo data for an empty store.

Seeds one student (Alex Dubois) with a two-month program, eight history
entries and four weight measurements, plus a small exercise lexicon. Each
group is written in a single batch, so a failed seed leaves nothing behind.

Seeded history entries are deliberately sparse (no warmup, no workout type,
no targets); the document readers fill the gaps.
"""

import logging
from datetime import datetime, timezone

from .client import CollectionPaths, FirestoreClient

logger = logging.getLogger(__name__)

DEMO_STUDENT_NAME = "Alex Dubois"
DEMO_COMMENT = "Bonne séance, un peu difficile."


def _session(name: str, warmup: str, warmup_duration: str, exercises: list[tuple]) -> dict:
    return {
        "name": name,
        "warmup": [{"name": warmup, "duration": warmup_duration}],
        "workout": {
            "type": "Force",
            "exercises": [
                {"name": exercise, "sets": [{"reps": reps, "load": load, "rest": rest}]}
                for exercise, reps, load, rest in exercises
            ],
        },
    }


DEMO_PROGRAM = {
    "name": "Prise de Masse - 2025",
    "folders": [
        {
            "name": "Mois 1",
            "sessions": [
                _session("Semaine 1 - PUSH", "Jumping Jacks", "60s", [
                    ("Développé couché", "12", "60kg", "90s"),
                    ("Écarté incliné", "15", "12kg", "60s"),
                ]),
                _session("Semaine 1 - PULL", "Corde à sauter", "180s", [
                    ("Tirage vertical", "12", "50kg", "90s"),
                ]),
                _session("Semaine 2 - LEGS", "Montées de genoux", "60s", [
                    ("Squat", "10", "80kg", "120s"),
                ]),
                _session("Semaine 2 - PUSH", "Jumping Jacks", "60s", [
                    ("Développé couché", "10", "65kg", "90s"),
                ]),
            ],
        },
        {
            "name": "Mois 2",
            "sessions": [
                _session("Semaine 3 - PUSH", "Jumping Jacks", "60s", [
                    ("Développé couché", "8", "70kg", "90s"),
                ]),
                _session("Semaine 3 - PULL", "Corde à sauter", "180s", [
                    ("Tirage vertical", "10", "55kg", "90s"),
                ]),
                _session("Semaine 4 - LEGS", "Montées de genoux", "60s", [
                    ("Squat", "8", "85kg", "120s"),
                ]),
                _session("Semaine 4 - PUSH", "Jumping Jacks", "60s", [
                    ("Développé couché", "6", "75kg", "90s"),
                ]),
            ],
        },
    ],
}

DEMO_STUDENT = {
    "name": DEMO_STUDENT_NAME,
    "username": "alex",
    "password": "password123",
    "program": DEMO_PROGRAM,
    "coachNotes": "Prochaines séances : Lundi 10h, Mercredi 18h. Pense à bien t'hydrater !",
}

# (date, session, exercise, weight lifted)
DEMO_HISTORY = [
    ("2025-01-06", "Semaine 1 - PUSH", "Développé couché", "60"),
    ("2025-01-08", "Semaine 1 - PULL", "Tirage vertical", "50"),
    ("2025-01-13", "Semaine 2 - LEGS", "Squat", "80"),
    ("2025-01-15", "Semaine 2 - PUSH", "Développé couché", "65"),
    ("2025-02-03", "Semaine 3 - PUSH", "Développé couché", "70"),
    ("2025-02-05", "Semaine 3 - PULL", "Tirage vertical", "55"),
    ("2025-02-10", "Semaine 4 - LEGS", "Squat", "85"),
    ("2025-02-12", "Semaine 4 - PUSH", "Développé couché", "75"),
]

DEMO_WEIGHTS = [
    ("2025-01-01", 80.5),
    ("2025-01-15", 80.1),
    ("2025-02-01", 79.5),
    ("2025-02-15", 79.2),
]

DEMO_LEXICON = [
    {
        "name": "Développé couché",
        "muscleGroup": "Pectoraux",
        "description": "Allongé sur un banc, descendre la barre au niveau de la poitrine et la repousser.",
        "videoUrl": "https://www.instagram.com/p/C5q4Z_gR1gD/",
    },
    {
        "name": "Squat",
        "muscleGroup": "Jambes",
        "description": "Fléchir les genoux en gardant le dos droit, comme pour s'asseoir sur une chaise.",
        "videoUrl": "https://www.instagram.com/p/C47Xg89rV2v/",
    },
    {
        "name": "Goblet Squat",
        "muscleGroup": "Jambes",
        "description": "Tenir un haltère verticalement contre sa poitrine et effectuer un squat.",
        "videoUrl": "https://www.instagram.com/p/C2_-_ygrYgC/",
    },
    {
        "name": "Jumping Jacks",
        "muscleGroup": "Cardio",
        "description": "Écarter les jambes et lever les bras simultanément en sautant.",
        "videoUrl": "https://www.instagram.com/p/C2_-_ygrYgC/",
    },
    {
        "name": "Montées de genoux",
        "muscleGroup": "Cardio",
        "description": "Courir sur place en montant les genoux le plus haut possible.",
        "videoUrl": "https://www.instagram.com/p/C2_-_ygrYgC/",
    },
    {
        "name": "Corde à sauter",
        "muscleGroup": "Cardio",
        "description": "Sauter au-dessus d'une corde en la faisant tourner.",
        "videoUrl": "https://www.instagram.com/p/C2_-_ygrYgC/",
    },
    {
        "name": "Pompes",
        "muscleGroup": "Pectoraux",
        "description": (
            "En position de planche, fléchir les bras pour amener la poitrine vers le sol, "
            "puis pousser pour revenir à la position initiale."
        ),
        "videoUrl": "https://www.instagram.com/p/C5q4Z_gR1gD/",
    },
]


def _utc(day: str) -> datetime:
    return datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc)


class DemoDataSeeder:
    """Writes the demo student and lexicon through raw batched document writes."""

    def __init__(self, client: FirestoreClient, paths: CollectionPaths) -> None:
        self._client = client
        self._paths = paths

    def seed_students(self) -> None:
        batch = self._client.batch()

        student_ref = self._client.collection(self._paths.students).document()
        batch.set(student_ref, DEMO_STUDENT)

        history = self._client.collection(self._paths.training_history(student_ref.id))
        for day, session_name, exercise, weight in DEMO_HISTORY:
            batch.set(history.document(), {
                "studentId": student_ref.id,
                "studentName": DEMO_STUDENT_NAME,
                "sessionName": session_name,
                "completedAt": _utc(day),
                "comment": DEMO_COMMENT,
                "workout": {
                    "exercises": [{
                        "name": exercise,
                        "sets": [{"performance": {"weight": weight, "reps": "8"}}],
                    }],
                },
            })

        weights = self._client.collection(self._paths.weight_history(student_ref.id))
        for day, weight in DEMO_WEIGHTS:
            batch.set(weights.document(), {"date": _utc(day), "weight": weight})

        batch.commit()
        logger.info(
            "Seeded demo student",
            extra={
                "student_id": student_ref.id,
                "history_entries": len(DEMO_HISTORY),
                "weight_entries": len(DEMO_WEIGHTS),
            },
        )

    def seed_lexicon(self) -> None:
        batch = self._client.batch()
        lexicon = self._client.collection(self._paths.lexicon)
        for exercise in DEMO_LEXICON:
            batch.set(lexicon.document(), exercise)
        batch.commit()
        logger.info("Seeded demo lexicon", extra={"exercises": len(DEMO_LEXICON)})
