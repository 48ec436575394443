"""
Category API routes for the Task Manager
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ...database.database import get_session
from ...models.category import CategoryCreate, CategoryPublic, CategoryUpdate, CategoryWithCount
from ...models.user import UserSession
from ...services.category_service import CategoryService
from ..deps import ensure_owner, get_current_user, raise_for_error

router = APIRouter(tags=["categories"])


@router.get("/{user_id}/categories", response_model=List[CategoryPublic])
async def list_categories(
    user_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user)
    categories, error = CategoryService.get_categories_by_user(session, user_id)
    if error:
        raise_for_error(error)
    return categories


@router.get("/{user_id}/categories/counts", response_model=List[CategoryWithCount])
async def list_categories_with_counts(
    user_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Categories with the number of tasks in each, including empty ones."""
    ensure_owner(user_id, current_user)
    categories, error = CategoryService.get_categories_with_task_counts(session, user_id)
    if error:
        raise_for_error(error)
    return categories


@router.post("/{user_id}/categories", response_model=CategoryPublic, status_code=status.HTTP_201_CREATED)
async def create_category(
    user_id: uuid.UUID,
    category_data: CategoryCreate,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """
    Create a category.

    Raises:
        HTTPException 422: A category with this name already exists for the user
    """
    ensure_owner(user_id, current_user, "create categories for")
    category, error = CategoryService.create_category(session, category_data, user_id)
    if error:
        raise_for_error(error)
    return category


@router.get("/{user_id}/categories/{category_id}", response_model=CategoryPublic)
async def get_category(
    user_id: uuid.UUID,
    category_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user)
    category, error = CategoryService.get_category_by_id(session, category_id, user_id)
    if error:
        raise_for_error(error)
    return category


@router.patch("/{user_id}/categories/{category_id}", response_model=CategoryPublic)
async def update_category(
    user_id: uuid.UUID,
    category_id: uuid.UUID,
    category_data: CategoryUpdate,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    ensure_owner(user_id, current_user, "modify")
    category, error = CategoryService.update_category(session, category_id, category_data, user_id)
    if error:
        raise_for_error(error)
    return category


@router.delete("/{user_id}/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    user_id: uuid.UUID,
    category_id: uuid.UUID,
    current_user: UserSession = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Delete a category; its tasks are kept without a category."""
    ensure_owner(user_id, current_user, "delete")
    _, error = CategoryService.delete_category(session, category_id, user_id)
    if error:
        raise_for_error(error)
    return None
