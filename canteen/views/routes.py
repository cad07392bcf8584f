from pathlib import Path
from typing import Optional
from urllib.parse import quote_plus

from fastapi import APIRouter, BackgroundTasks, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.templating import Jinja2Templates
from fastapi_users.exceptions import InvalidPasswordException, UserAlreadyExists
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from canteen.auth.dependencies import user_from_token
from canteen.auth.routes import get_jwt_strategy, get_user_manager
from canteen.core.constants import ORDER_PIPELINE, OrderStatus, Role
from canteen.core.errors import CanteenError
from canteen.crud import bill as bill_crud
from canteen.crud import menu as menu_crud
from canteen.crud import order as order_crud
from canteen.db import get_db
from canteen.schemas.menu import MenuItemCreate, MenuItemUpdate
from canteen.schemas.order import BillRead, OrderRead, OrderWithBill
from canteen.schemas.user import UserCreate
from canteen.services.checkout import checkout
from canteen.services.notifications import notify_checkout, notify_order_update
from canteen.services.order_status import transition_order
from canteen.views.cart import CartStore

BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

router = APIRouter(prefix="/ui", include_in_schema=False)


class LoginRequired(Exception):
    """Raised by view guards; rendered as a redirect to the login page."""

    def __init__(self, error: Optional[str] = None):
        self.error = error
        super().__init__(error)


def get_cart(request: Request) -> CartStore:
    return CartStore(request.session)


async def get_view_user(request: Request, user_manager=Depends(get_user_manager)):
    return await user_from_token(request.session.get("token"), user_manager)


def require_view_roles(*roles):
    """Session-based counterpart of ``require_roles`` for the HTML views."""
    allowed = {r.value if isinstance(r, Role) else r for r in roles}

    async def _dep(user=Depends(get_view_user)):
        if not user:
            raise LoginRequired("Please sign in")
        if user.role not in allowed:
            raise LoginRequired(f"Requires role: {', '.join(sorted(allowed))}")
        return user

    return _dep


view_admin = require_view_roles(Role.admin)
view_customer = require_view_roles(Role.student, Role.staff)
view_member = require_view_roles(Role.student, Role.staff, Role.admin)


async def login_required_handler(request: Request, exc: LoginRequired):
    return _redirect("/ui/login", error=exc.error)


def _redirect(url: str, error: Optional[str] = None, success: Optional[str] = None):
    if error:
        url = f"{url}?error={quote_plus(error)}"
    elif success:
        url = f"{url}?success={quote_plus(success)}"
    return RedirectResponse(url, status_code=303)


def _render(request: Request, name: str, user=None, cart: Optional[CartStore] = None, **context):
    context.update(
        user=user,
        cart_count=cart.count if cart else 0,
        error=context.get("error") or request.query_params.get("error"),
        success=context.get("success") or request.query_params.get("success"),
    )
    return templates.TemplateResponse(request, name, context)


# -----------------------
# Auth
# -----------------------

@router.get("/", response_class=HTMLResponse)
async def home(request: Request, user=Depends(get_view_user), cart: CartStore = Depends(get_cart)):
    return _render(request, "home.html", user=user, cart=cart)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return _render(request, "login.html")


@router.post("/login")
async def login_post(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    user_manager=Depends(get_user_manager),
):
    credentials = OAuth2PasswordRequestForm(username=email.strip(), password=password)
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        return _render(request, "login.html", error="Invalid email or password.")

    request.session["token"] = await get_jwt_strategy().write_token(user)
    if user.role == Role.admin.value:
        return RedirectResponse("/ui/admin", status_code=303)
    return RedirectResponse("/ui/menu", status_code=303)


@router.get("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/ui/login", status_code=303)


@router.get("/register", response_class=HTMLResponse)
async def register_page(request: Request):
    return _render(request, "register.html")


@router.post("/register")
async def register_post(
    request: Request,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form("student"),
    register_number: str = Form(""),
    user_manager=Depends(get_user_manager),
):
    try:
        user_create = UserCreate(
            name=name.strip(),
            email=email.strip(),
            password=password,
            role=role,
            register_number=register_number.strip() or None,
        )
        await user_manager.create(user_create, safe=True, request=request)
    except PydanticValidationError as e:
        return _render(request, "register.html", error=e.errors()[0]["msg"])
    except UserAlreadyExists:
        return _render(request, "register.html", error="Email already registered.")
    except InvalidPasswordException as e:
        return _render(request, "register.html", error=e.reason)

    return _redirect("/ui/login", success="Account created, please sign in")


# -----------------------
# Menu + Cart
# -----------------------

@router.get("/menu", response_class=HTMLResponse)
async def menu_page(
    request: Request,
    category: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_view_user),
    cart: CartStore = Depends(get_cart),
):
    all_items = await menu_crud.get_menu_items(db)
    categories = sorted({i.category for i in all_items})
    items = [i for i in all_items if not category or i.category == category]
    return _render(
        request, "menu.html", user=user, cart=cart,
        items=items, categories=categories, category=category,
    )


@router.post("/cart/add")
async def cart_add(
    menu_id: str = Form(...),
    qty: int = Form(1),
    db: AsyncSession = Depends(get_db),
    cart: CartStore = Depends(get_cart),
):
    item = await menu_crud.get_menu_item(db, menu_id)
    if not item:
        return _redirect("/ui/menu", error="Menu item not found")
    if qty < 1:
        return _redirect("/ui/menu", error="Quantity must be at least 1")
    cart.add(item, qty)
    return _redirect("/ui/menu", success=f"Added {item.name}")


@router.get("/cart", response_class=HTMLResponse)
async def cart_page(request: Request, user=Depends(get_view_user), cart: CartStore = Depends(get_cart)):
    return _render(request, "cart.html", user=user, cart=cart, lines=cart.lines(), total=cart.total)


@router.post("/cart/update")
async def cart_update(menu_id: str = Form(...), qty: int = Form(...), cart: CartStore = Depends(get_cart)):
    cart.update_qty(menu_id, qty)
    return _redirect("/ui/cart")


@router.post("/cart/remove")
async def cart_remove(menu_id: str = Form(...), cart: CartStore = Depends(get_cart)):
    cart.remove(menu_id)
    return _redirect("/ui/cart")


@router.post("/cart/submit")
async def cart_submit(
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    user=Depends(view_customer),
    cart: CartStore = Depends(get_cart),
):
    if cart.is_empty():
        return _redirect("/ui/cart", error="Your cart is empty")

    try:
        order, bill = await checkout(db, user, cart.checkout_items())
    except CanteenError as e:
        return _redirect("/ui/cart", error=e.message)

    cart.clear()
    order_data = OrderRead.model_validate(order).model_dump(mode="json", by_alias=True)
    bill_data = BillRead.model_validate(bill).model_dump(mode="json", by_alias=True)
    background_tasks.add_task(notify_checkout, order_data, bill_data)
    return _redirect("/ui/my-orders", success=f"Order {order.token_number} placed, bill {bill.bill_number}")


# -----------------------
# Orders
# -----------------------

@router.get("/my-orders", response_class=HTMLResponse)
async def my_orders_page(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user=Depends(view_member),
    cart: CartStore = Depends(get_cart),
):
    orders = await order_crud.get_orders_for_user(db, user.id)
    bills = [BillRead.model_validate(b) for b in await bill_crud.get_bills_for_user(db, user.id)]
    return _render(
        request, "my_orders.html", user=user, cart=cart,
        orders=orders, bills=bills, ws_token=request.session.get("token"),
    )


# -----------------------
# Admin
# -----------------------

@router.get("/admin", response_class=HTMLResponse)
async def admin_dashboard(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user=Depends(view_admin),
):
    orders = [OrderWithBill.model_validate(o) for o in await order_crud.get_all_orders(db)]
    terminal = (OrderStatus.completed.value, OrderStatus.cancelled.value)
    return _render(
        request, "admin.html", user=user,
        menu_items=await menu_crud.get_menu_items(db),
        ongoing=[o for o in orders if o.status not in terminal],
        completed=[o for o in orders if o.status == OrderStatus.completed.value],
        cancelled=[o for o in orders if o.status == OrderStatus.cancelled.value],
        statuses=[s.value for s in ORDER_PIPELINE] + [OrderStatus.cancelled.value],
        ws_token=request.session.get("token"),
    )


@router.post("/admin/menu")
async def admin_create_menu_item(
    name: str = Form(...),
    category: str = Form(...),
    price: int = Form(...),
    description: str = Form(""),
    db: AsyncSession = Depends(get_db),
    user=Depends(view_admin),
):
    try:
        payload = MenuItemCreate(name=name, category=category, price=price, description=description)
    except PydanticValidationError as e:
        return _redirect("/ui/admin", error=e.errors()[0]["msg"])
    item = await menu_crud.create_menu_item(db, payload)
    return _redirect("/ui/admin", success=f"Added {item.name}")


@router.post("/admin/menu/{item_id}")
async def admin_edit_menu_item(
    item_id: str,
    name: str = Form(...),
    category: str = Form(...),
    price: int = Form(...),
    description: str = Form(""),
    available: Optional[str] = Form(None),
    db: AsyncSession = Depends(get_db),
    user=Depends(view_admin),
):
    # Unchecked checkboxes are simply absent from the form
    try:
        updates = MenuItemUpdate(
            name=name.strip(),
            category=category.strip(),
            price=price,
            description=description.strip(),
            available=available is not None,
        )
    except PydanticValidationError as e:
        return _redirect("/ui/admin", error=e.errors()[0]["msg"])

    item = await menu_crud.update_menu_item(db, item_id, updates)
    if not item:
        return _redirect("/ui/admin", error="Menu item not found")
    return _redirect("/ui/admin", success=f"Updated {item.name}")


@router.post("/admin/menu/{item_id}/toggle")
async def admin_toggle_menu_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(view_admin),
):
    item = await menu_crud.get_menu_item(db, item_id)
    if not item:
        return _redirect("/ui/admin", error="Menu item not found")
    await menu_crud.update_menu_item(db, item_id, MenuItemUpdate(available=not item.available))
    return _redirect("/ui/admin")


@router.post("/admin/menu/{item_id}/delete")
async def admin_delete_menu_item(
    item_id: str,
    db: AsyncSession = Depends(get_db),
    user=Depends(view_admin),
):
    await menu_crud.delete_menu_item(db, item_id)
    return _redirect("/ui/admin", success="Menu item deleted")


@router.post("/admin/orders/{order_id}/status")
async def admin_update_order_status(
    order_id: str,
    background_tasks: BackgroundTasks,
    status: str = Form(...),
    reason: str = Form(""),
    db: AsyncSession = Depends(get_db),
    user=Depends(view_admin),
):
    try:
        order = await transition_order(db, order_id, status, reason or None)
    except CanteenError as e:
        return _redirect("/ui/admin", error=e.message)

    updated = OrderWithBill.model_validate(order).model_dump(mode="json", by_alias=True)
    background_tasks.add_task(notify_order_update, updated)
    return _redirect("/ui/admin", success=f"Order {order.token_number} is now {order.status}")
