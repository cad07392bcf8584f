from fastapi import APIRouter, Depends

from canteen.auth.routes import get_current_user
from canteen.models.user import User

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def whoami(user: User = Depends(get_current_user)):
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "registerNumber": user.register_number,
    }
