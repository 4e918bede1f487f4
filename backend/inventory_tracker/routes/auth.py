# inventory_tracker/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from inventory_tracker.database import get_db
from inventory_tracker.models.users import User
from inventory_tracker.schemas import user as schemas
from inventory_tracker.utils.audit import write_log
from inventory_tracker.utils.hashing import get_password_hash, verify_password
from inventory_tracker.utils.tokenJWT import create_access_token, get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Register a new user
@router.post("/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = user.email.strip().lower()

    # Check for existing user
    db_user = db.query(User).filter(func.lower(User.email) == normalized_email).first()
    if db_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    # Create new user instance with hashed password
    new_user = User(
        name=user.name,
        email=normalized_email,
        password_hash=get_password_hash(user.password),
        role=user.role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    write_log(
        db, user_id=new_user.id, action="create", entity="user", entity_id=new_user.id,
        description=f"Registered user {new_user.email}", request=request,
    )

    access_token = create_access_token(data={"sub": new_user.email, "role": new_user.role})
    return {"access_token": access_token, "token_type": "bearer", "user": new_user}


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.email == payload.email.strip().lower()).first()

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": db_user.email, "role": db_user.role})

    write_log(
        db, user_id=db_user.id, action="login", entity="user", entity_id=db_user.id,
        description=f"{db_user.email} logged in", request=request,
    )

    return {"access_token": access_token, "token_type": "bearer", "user": db_user}


# Record a logout; the token itself simply expires client side
@router.post("/logout")
def logout(request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    write_log(
        db, user_id=current_user.id, action="logout", entity="user", entity_id=current_user.id,
        description=f"{current_user.email} logged out", request=request,
    )
    return {"detail": "Logged out"}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
