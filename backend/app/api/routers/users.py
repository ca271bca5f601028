from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.core.errors import UserValidationError
from app.crud.users import update as update_user
from app.db.models.user import User
from app.schemas.auth import UserOut
from app.schemas.users import UserUpdateIn, FieldErrorOut

router = APIRouter()

@router.get("/me", response_model=UserOut)
def get_me(user: User = Depends(get_current_user)):
    return user

@router.put("/me", response_model=UserOut)
def put_me(data: UserUpdateIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    try:
        updated = update_user(db, user.id, data.model_dump(exclude_unset=True, exclude_none=True))
    except UserValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=[FieldErrorOut(field=er.field, message=er.message).model_dump() for er in e.errors],
        )
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return updated
