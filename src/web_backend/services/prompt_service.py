"""
Prompt service for the SlothBoost web backend.

The persistence collaborator: saves prompt versions, lists families and
searches a user's history. Version numbers come from the counter kept on
the family root, so a deleted version's number is never handed out again.
"""

from typing import Optional, List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, func, delete, update, or_, and_
from sqlalchemy.orm.attributes import set_committed_value
import logging

from prompt_framework.exceptions import PersistenceError, VersionNotFoundError

from ..models.prompt import PromptRecord

logger = logging.getLogger(__name__)


def _family_root():
    return func.coalesce(PromptRecord.parent_id, PromptRecord.id)


class PromptService:
    """Service for saved prompts and their versions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, action: str):
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise PersistenceError(f"Failed to {action}") from e

    async def save(
        self,
        user_id: str,
        original_input: str,
        generated_prompt: str,
        mode: Optional[str] = None,
        questions_snapshot: Optional[Dict[str, Any]] = None,
        parent_id: Optional[str] = None,
    ) -> PromptRecord:
        """
        Save a prompt version.

        Args:
            user_id: Owner of the prompt
            original_input: The user's raw request
            generated_prompt: The text being saved
            mode: Session mode that produced it
            questions_snapshot: Answers that produced it
            parent_id: Any version of an existing family; None starts a new family

        Returns:
            The saved record, carrying its id and version
        """
        try:
            if parent_id is None:
                record = PromptRecord(
                    user_id=user_id,
                    original_input=original_input,
                    generated_prompt=generated_prompt,
                    mode=mode,
                    questions_snapshot=questions_snapshot,
                    version=1,
                    latest_version=1,
                )
            else:
                root = await self._root_of(parent_id, user_id)
                version = await self._next_version(root)
                record = PromptRecord(
                    parent_id=root.id,
                    user_id=user_id,
                    original_input=original_input,
                    generated_prompt=generated_prompt,
                    mode=mode,
                    questions_snapshot=questions_snapshot,
                    version=version,
                    latest_version=version,
                )
            self.db.add(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to save prompt: {e}")
            raise PersistenceError("Failed to save prompt") from e

        await self._commit("save prompt")
        await self.db.refresh(record)

        logger.info(f"Saved prompt {record.id} version {record.version} for user {user_id}")
        return record

    async def _next_version(self, root: PromptRecord) -> int:
        # Incremented in the database so concurrent saves never share a number
        result = await self.db.execute(
            update(PromptRecord)
            .where(PromptRecord.id == root.id)
            .values(latest_version=PromptRecord.latest_version + 1)
            .returning(PromptRecord.latest_version)
            .execution_options(synchronize_session=False)
        )
        version = result.scalar_one()
        set_committed_value(root, "latest_version", version)
        return version

    async def _load(self, prompt_id: str) -> Optional[PromptRecord]:
        try:
            result = await self.db.execute(
                select(PromptRecord).where(PromptRecord.id == prompt_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load prompt {prompt_id}: {e}")
            raise PersistenceError(f"Failed to load prompt {prompt_id}") from e
        return result.scalar_one_or_none()

    async def get(self, prompt_id: str, user_id: Optional[str] = None) -> PromptRecord:
        """
        Get a prompt version by ID.

        Raises:
            VersionNotFoundError: unknown id, or owned by another user
        """
        record = await self._load(prompt_id)
        if record is None or (user_id is not None and record.user_id != user_id):
            raise VersionNotFoundError(f"Prompt {prompt_id} not found")
        return record

    async def _root_of(self, prompt_id: str, user_id: Optional[str] = None) -> PromptRecord:
        record = await self.get(prompt_id, user_id)
        if record.parent_id is None:
            return record
        return await self.get(record.parent_id, user_id)

    async def list_versions(self, prompt_id: str, user_id: Optional[str] = None) -> List[PromptRecord]:
        """All versions of the family containing prompt_id, oldest first."""
        record = await self.get(prompt_id, user_id)
        root_id = record.root_id
        try:
            result = await self.db.execute(
                select(PromptRecord)
                .where(or_(PromptRecord.id == root_id, PromptRecord.parent_id == root_id))
                .order_by(PromptRecord.version.asc())
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list versions of {root_id}: {e}")
            raise PersistenceError(f"Failed to list versions of {root_id}") from e
        return list(result.scalars().all())

    async def delete(self, prompt_id: str, user_id: Optional[str] = None) -> List[str]:
        """
        Delete a version. Deleting a root removes its whole family.

        Returns:
            IDs of the deleted records
        """
        record = await self.get(prompt_id, user_id)

        if record.parent_id is None:
            condition = or_(PromptRecord.id == record.id, PromptRecord.parent_id == record.id)
        else:
            condition = PromptRecord.id == record.id

        try:
            ids_result = await self.db.execute(select(PromptRecord.id).where(condition))
            deleted = list(ids_result.scalars().all())
            await self.db.execute(delete(PromptRecord).where(condition))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete prompt {prompt_id}: {e}")
            raise PersistenceError(f"Failed to delete prompt {prompt_id}") from e

        await self._commit(f"delete prompt {prompt_id}")
        logger.info(f"Deleted {len(deleted)} prompt record(s) starting at {prompt_id}")
        return deleted

    def _latest_query(self, user_id: str):
        """Latest version of every family the user owns."""
        latest = (
            select(
                _family_root().label("root_id"),
                func.max(PromptRecord.version).label("max_version"),
            )
            .where(PromptRecord.user_id == user_id)
            .group_by(_family_root())
            .subquery()
        )
        return (
            select(PromptRecord)
            .join(
                latest,
                and_(
                    _family_root() == latest.c.root_id,
                    PromptRecord.version == latest.c.max_version,
                ),
            )
            .where(PromptRecord.user_id == user_id)
        )

    async def list_latest(self, user_id: str, limit: int = 20, offset: int = 0) -> List[PromptRecord]:
        """Latest version per family, newest first."""
        query = (
            self._latest_query(user_id)
            .order_by(PromptRecord.created_at.desc(), PromptRecord.id)
            .offset(offset)
            .limit(limit)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Failed to list prompts for {user_id}: {e}")
            raise PersistenceError("Failed to list prompts") from e
        return list(result.scalars().all())

    async def search(self, user_id: str, query: str, limit: int = 20) -> List[PromptRecord]:
        """Case-insensitive match on the latest version's input or prompt."""
        query = (query or "").strip()
        if not query:
            return await self.list_latest(user_id, limit=limit)

        pattern = f"%{query}%"
        statement = (
            self._latest_query(user_id)
            .where(or_(
                PromptRecord.original_input.ilike(pattern),
                PromptRecord.generated_prompt.ilike(pattern),
            ))
            .order_by(PromptRecord.created_at.desc(), PromptRecord.id)
            .limit(limit)
        )
        try:
            result = await self.db.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"Failed to search prompts for {user_id}: {e}")
            raise PersistenceError("Failed to search prompts") from e
        return list(result.scalars().all())

    async def count(self, user_id: str) -> int:
        """Number of prompt families the user owns."""
        try:
            result = await self.db.execute(
                select(func.count(func.distinct(_family_root())))
                .where(PromptRecord.user_id == user_id)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to count prompts for {user_id}: {e}")
            raise PersistenceError("Failed to count prompts") from e
        return result.scalar() or 0
