"""MongoDB implementation of SubmissionStore.

Every accepted submission becomes one new document in ``form_submissions``:

    {**payload, "submittedAt": <server clock>}

The write is an upsert keyed on a freshly generated ObjectId whose update is
a one-stage pipeline:

    $replaceWith: $mergeObjects[$literal(payload), {_id, submittedAt: $$NOW}]

``$literal`` stores the payload as a constant document, so keys containing
dots or starting with ``$`` are kept as literal field names instead of being
read as update paths or expressions. ``$$NOW`` is the MongoDB server's clock;
being merged last, it supersedes any ``submittedAt`` in the payload, as does
the generated ``_id``. The fresh _id never matches an existing document, so
each call inserts exactly one document and never reads or modifies another.
"""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from bson.errors import BSONError
from pymongo.errors import PyMongoError

from errors import SubmissionWriteError
from shared.logging import get_logger

log = get_logger(__name__)

SUBMISSIONS_COLLECTION = "form_submissions"
SUBMITTED_AT_FIELD = "submittedAt"


def build_insert_pipeline(
    document_id: ObjectId, payload: dict[str, Any]
) -> list[dict[str, Any]]:
    """Update pipeline that writes ``payload`` verbatim, stamped with the server clock."""
    return [
        {
            "$replaceWith": {
                "$mergeObjects": [
                    {"$literal": dict(payload)},
                    {"_id": document_id, SUBMITTED_AT_FIELD: "$$NOW"},
                ]
            }
        }
    ]


class MongoSubmissionStore:
    def __init__(self, collection) -> None:
        self._collection = collection

    @classmethod
    def from_database(cls, db) -> "MongoSubmissionStore":
        return cls(db[SUBMISSIONS_COLLECTION])

    async def append(self, payload: dict[str, Any]) -> str:
        """Insert one submission document and return its id.

        Raises SubmissionWriteError on any store failure.
        """
        document_id = ObjectId()
        try:
            result = await self._collection.update_one(
                {"_id": document_id},
                build_insert_pipeline(document_id, payload),
                upsert=True,
            )
        except (PyMongoError, BSONError) as e:
            log.error(
                "submission_write_failed",
                collection=SUBMISSIONS_COLLECTION,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise SubmissionWriteError("Failed to store submission") from e

        if result.upserted_id is None:
            log.error("submission_not_inserted", collection=SUBMISSIONS_COLLECTION)
            raise SubmissionWriteError("Submission was not inserted")
        return str(result.upserted_id)
