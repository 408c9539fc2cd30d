import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from doctor_availability.auth import jwt_handler
from doctor_availability.database import get_db
from doctor_availability.models.doctor import Doctor
from doctor_availability.models.user import User

security = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    try:
        email = jwt_handler.get_token_email(credentials.credentials)
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_doctor(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Doctor:
    if user.role != "doctor":
        raise HTTPException(status_code=403, detail="Only doctors can manage availability.")

    doctor = db.query(Doctor).filter(Doctor.user_id == user.id).first()
    if doctor is None:
        raise HTTPException(status_code=404, detail="Doctor profile not found")
    return doctor
