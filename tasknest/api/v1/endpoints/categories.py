import logging
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from tasknest import crud, models, schemas
from tasknest.api import deps
from tasknest.core.config import settings
from tasknest.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_owned_category(db: Session, category_id: int, user_id: int) -> models.Category:
    category = crud.category.get_for_user(db, category_id=category_id, user_id=user_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.get("/", response_model=List[schemas.CategoryWithCount])
def read_categories(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
) -> Any:
    """The current user's categories by name, with how many reminders use each."""
    rows = crud.category.list_with_counts(db, user_id=current_user.id)
    return [
        schemas.CategoryWithCount(
            id=category.id,
            name=category.name,
            color=category.color,
            icon=category.icon,
            reminder_count=count,
        )
        for category, count in rows
    ]


@router.post("/", response_model=schemas.Category, status_code=status.HTTP_201_CREATED)
def create_category(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    category_in: schemas.CategoryIn,
) -> Any:
    name = (category_in.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    if crud.category.get_by_name(db, user_id=current_user.id, name=name):
        raise HTTPException(status_code=409, detail="Category already exists")

    category = crud.category.create_for_user(
        db,
        user_id=current_user.id,
        name=name,
        color=category_in.color or settings.DEFAULT_CATEGORY_COLOR,
        icon=category_in.icon,
    )
    logger.info(f"User {current_user.id} created category {category.id}")
    return category


@router.get("/{category_id}", response_model=schemas.Category)
def read_category(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    category_id: int,
) -> Any:
    return _get_owned_category(db, category_id, current_user.id)


@router.put("/{category_id}", response_model=schemas.Category)
def update_category(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    category_id: int,
    category_in: schemas.CategoryIn,
) -> Any:
    """
    Rename or restyle a category. An omitted color keeps the current one,
    an omitted icon clears it.
    """
    name = (category_in.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    category = _get_owned_category(db, category_id, current_user.id)
    if crud.category.get_by_name(db, user_id=current_user.id, name=name, exclude_id=category.id):
        raise HTTPException(status_code=409, detail="Category name already exists")

    update_data = {
        "name": name,
        "color": category_in.color or category.color,
        "icon": category_in.icon,
    }
    return crud.category.update(db, db_obj=category, obj_in=update_data)


@router.delete("/{category_id}", response_model=schemas.MessageResponse)
def delete_category(
    *,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(deps.get_current_active_user),
    category_id: int,
) -> Any:
    category = _get_owned_category(db, category_id, current_user.id)
    crud.category.remove_for_user(db, db_obj=category)
    logger.info(f"User {current_user.id} deleted category {category_id}")
    return {"message": "Category deleted successfully"}
