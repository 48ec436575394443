"""
Category service module for the Task Manager
Owner-scoped category operations; deleting a category detaches its tasks
"""
import uuid
from typing import List

from sqlalchemy import func
from sqlmodel import Session, select

from ..models.category import Category, CategoryCreate, CategoryUpdate, CategoryWithCount, DEFAULT_CATEGORIES
from ..models.task import Task
from ..utils.clock import utcnow
from ..utils.errors import CategoryNotFoundException
from ..utils.logging import log_error
from .result import TRANSPORT_ERRORS, ServiceResult, failure_result


class CategoryService:
    """Service class for category operations"""

    @staticmethod
    def _get_owned_category(db: Session, category_id: uuid.UUID, user_id: uuid.UUID) -> Category:
        statement = select(Category).where(Category.id == category_id, Category.user_id == user_id)
        category = db.exec(statement).first()
        if not category:
            raise CategoryNotFoundException(category_id)
        return category

    @staticmethod
    def seed_default_categories(db: Session, user_id: uuid.UUID) -> List[Category]:
        """
        Add the default categories for a new user to the session.

        Does not commit; the caller owns the transaction.
        """
        categories = [Category(name=name, color=color, user_id=user_id) for name, color in DEFAULT_CATEGORIES]
        db.add_all(categories)
        return categories

    @staticmethod
    def get_categories_by_user(db: Session, user_id: uuid.UUID) -> ServiceResult[List[Category]]:
        """Get all categories for a user, ordered by name."""
        context = "CategoryService.get_categories_by_user"
        try:
            statement = select(Category).where(Category.user_id == user_id).order_by(Category.name.asc())
            return ServiceResult.success(list(db.exec(statement).all()))
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def get_category_by_id(db: Session, category_id: uuid.UUID, user_id: uuid.UUID) -> ServiceResult[Category]:
        context = f"CategoryService.get_category_by_id (id={category_id})"
        try:
            return ServiceResult.success(CategoryService._get_owned_category(db, category_id, user_id))
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def get_categories_with_task_counts(db: Session, user_id: uuid.UUID) -> ServiceResult[List[CategoryWithCount]]:
        """
        Get all categories for a user with the number of tasks in each.

        Categories without tasks are included with a count of zero.
        """
        context = "CategoryService.get_categories_with_task_counts"
        try:
            statement = (
                select(Category, func.count(Task.id))
                .outerjoin(Task, Task.category_id == Category.id)
                .where(Category.user_id == user_id)
                .group_by(Category.id)
                .order_by(Category.name.asc())
            )
            rows = db.exec(statement).all()
            return ServiceResult.success([
                CategoryWithCount(**category.model_dump(), task_count=count)
                for category, count in rows
            ])
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def create_category(db: Session, category_data: CategoryCreate, user_id: uuid.UUID) -> ServiceResult[Category]:
        """
        Create a new category for a user.

        A duplicate name for the same user fails with a VALIDATION error.
        """
        context = "CategoryService.create_category"
        try:
            category = Category(**category_data.model_dump(), user_id=user_id)
            db.add(category)
            db.commit()
            db.refresh(category)
            return ServiceResult.success(category)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def update_category(
        db: Session,
        category_id: uuid.UUID,
        category_data: CategoryUpdate,
        user_id: uuid.UUID,
    ) -> ServiceResult[Category]:
        context = f"CategoryService.update_category (id={category_id})"
        try:
            category = CategoryService._get_owned_category(db, category_id, user_id)

            update_dict = category_data.model_dump(exclude_unset=True)
            if update_dict.get("name", "") is None:
                del update_dict["name"]
            if update_dict.get("color", "") is None:
                del update_dict["color"]
            for field, value in update_dict.items():
                setattr(category, field, value)
            category.updated_at = utcnow()

            db.add(category)
            db.commit()
            db.refresh(category)
            return ServiceResult.success(category)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)

    @staticmethod
    def delete_category(db: Session, category_id: uuid.UUID, user_id: uuid.UUID) -> ServiceResult[uuid.UUID]:
        """
        Delete a category.

        Tasks in the category are kept and detached (category_id set to null)
        in the same transaction.
        """
        context = f"CategoryService.delete_category (id={category_id})"
        try:
            category = CategoryService._get_owned_category(db, category_id, user_id)

            now = utcnow()
            detached = db.exec(
                select(Task).where(Task.category_id == category_id, Task.user_id == user_id)
            ).all()
            for task in detached:
                task.category_id = None
                task.updated_at = now
                db.add(task)
            db.delete(category)
            db.commit()
            return ServiceResult.success(category_id)
        except TRANSPORT_ERRORS as e:
            log_error(e, context, user_id)
            db.rollback()
            raise
        except Exception as e:
            return failure_result(db, e, context, user_id)
