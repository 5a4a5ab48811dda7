from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dental_backend.auth.dependencies import get_current_user
from dental_backend.models.profile import Profile

router = APIRouter(tags=['auth'])


class CurrentUserResponse(BaseModel):
    id: str
    email: str | None = None
    full_name: str | None = None
    role: str | None = None

    class Config:
        from_attributes = True


@router.get('/me', response_model=CurrentUserResponse)
def me(current_user: Profile = Depends(get_current_user)):
    return current_user
