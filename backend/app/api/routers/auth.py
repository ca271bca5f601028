from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_user
from app.core.logging import logger
from app.schemas.auth import LoginIn, TokenOut, UserOut
from app.crud.users import find_by_email, update_last_login
from app.core.security import verify_password, create_access_token

router = APIRouter()

@router.post("/login", response_model=TokenOut)
def login(data: LoginIn, db: Session = Depends(get_db)):
    user = find_by_email(db, data.email)
    if not user or not verify_password(data.password, user.password_hash):
        logger.info("login_rejected", email=data.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    update_last_login(db, user.id)
    token = create_access_token(sub=user.email, user_id=user.id)
    logger.info("login_ok", user_id=user.id)
    return TokenOut(access_token=token)

@router.get("/me", response_model=UserOut)
def me(user = Depends(get_current_user)):
    return user

@router.post("/logout")
def logout(user = Depends(get_current_user)):
    # tokens are stateless; the client drops its copy
    logger.info("logout", user_id=user.id)
    return {"status": "ok"}
