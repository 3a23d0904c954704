"""Firestore repository for the exercise lexicon."""

import logging

from ....core.program.models import ExerciseLexiconEntry
from ..client import CollectionPaths, FirestoreClient
from ..documents import lexicon_from_dict, lexicon_to_dict

logger = logging.getLogger(__name__)


class LexiconRepository:
    def __init__(self, client: FirestoreClient, paths: CollectionPaths) -> None:
        self._client = client
        self._paths = paths

    def _collection(self):
        return self._client.collection(self._paths.lexicon)

    def list_entries(self) -> list[ExerciseLexiconEntry]:
        return [lexicon_from_dict(doc.id, doc.to_dict() or {}) for doc in self._collection().stream()]

    def add_entry(self, entry: ExerciseLexiconEntry) -> str:
        _, ref = self._collection().add(lexicon_to_dict(entry))
        logger.info("Added lexicon entry", extra={"entry_id": ref.id, "exercise": entry.name})
        return ref.id

    def update_entry(self, entry_id: str, entry: ExerciseLexiconEntry) -> None:
        self._collection().document(entry_id).update(lexicon_to_dict(entry))

    def delete_entry(self, entry_id: str) -> None:
        self._collection().document(entry_id).delete()
        logger.info("Deleted lexicon entry", extra={"entry_id": entry_id})
