from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .auth.config import DEFAULT_AUTH_CONFIG
from .auth.dependencies import require_admin, require_self_or_admin, require_user
from .auth.models import LoginRequest, RegisterRequest, UserOut, UserPage, UserUpdate
from .auth.users import authenticate, register, seed_demo_users, session_user
from .errors import ApiError
from .llm.groq_client import generate_recipe_suggestions
from .llm.models import AISuggestionRequest, AISuggestionResponse
from .models import MessageResponse
from .recipes import service as recipes
from .recipes.models import (
    Language,
    MoodSuggestionRequest,
    MoodSuggestionResponse,
    Recipe,
    RecipeCreate,
    RecipeDetail,
    RecipePage,
    RecipeUpdate,
    RecipeWithReviews,
    SmartSuggestionRequest,
)
from .recommendations.suggestions import mood_suggestions, recipes_by_mood, smart_suggestions
from .reviews import service as reviews
from .reviews.models import Review, ReviewPage, ReviewRequest, ReviewWriteResponse
from .users import service as users

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Mood Recipes API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=DEFAULT_AUTH_CONFIG.session_secret,
    max_age=DEFAULT_AUTH_CONFIG.session_max_age,
    same_site="lax",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in os.environ.get("FRONTEND_ORIGINS", "http://localhost:5173").split(",")
        if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if DEFAULT_AUTH_CONFIG.seed_demo_users:
    seed_demo_users()


def get_language(accept_language: str | None = Header(default=None)) -> Language:
    return Language.from_header(accept_language)


# ── Error handling ───────────────────────────────────────────────────────


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=503, content={"message": "Database unavailable"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Something went wrong"})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/api/auth/register", response_model=MessageResponse)
def register_user(body: RegisterRequest) -> MessageResponse:
    register(body)
    return MessageResponse(message="User has been created!")


@app.post("/api/auth/login", response_model=UserOut)
def login(body: LoginRequest, request: Request) -> UserOut:
    record = authenticate(body.email, body.password)
    request.session["user"] = session_user(record)
    return UserOut.model_validate(record)


@app.get("/api/auth/profile")
def profile(user: dict = Depends(require_user)) -> dict:
    return user


@app.get("/api/auth/logout", response_model=MessageResponse)
def logout(request: Request) -> MessageResponse:
    request.session.clear()
    return MessageResponse(message="Logged out successfully!")


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/api/users/favorites", response_model=list[Recipe])
def list_favorites(user: dict = Depends(require_user)) -> list[Recipe]:
    return users.get_favorites(user["id"])


@app.post("/api/users/favorites/{recipe_id}", response_model=MessageResponse)
def add_favorite(recipe_id: str, user: dict = Depends(require_user)) -> MessageResponse:
    users.add_favorite(user["id"], recipe_id)
    return MessageResponse(message="Recipe added to favorites!")


@app.delete("/api/users/favorites/{recipe_id}", response_model=MessageResponse)
def remove_favorite(recipe_id: str, user: dict = Depends(require_user)) -> MessageResponse:
    users.remove_favorite(user["id"], recipe_id)
    return MessageResponse(message="Recipe removed from favorites")


@app.get("/api/users", response_model=UserPage)
def list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str = "",
    admin: dict = Depends(require_admin),
) -> UserPage:
    return users.list_users(page, limit, search)


@app.get("/api/users/{user_id}", response_model=UserOut)
def get_user(user_id: str, admin: dict = Depends(require_admin)) -> UserOut:
    return users.get_user(user_id)


@app.put("/api/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    body: UserUpdate,
    request: Request,
    actor: dict = Depends(require_self_or_admin),
) -> UserOut:
    updated = users.update_user(user_id, body, actor)
    if actor["id"] == user_id:
        request.session["user"] = session_user(updated.model_dump(mode="json"))
    return updated


@app.delete("/api/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    request: Request,
    actor: dict = Depends(require_self_or_admin),
) -> MessageResponse:
    users.delete_user(user_id)
    if actor["id"] == user_id:
        request.session.clear()
    return MessageResponse(message="User deleted successfully!")


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/api/recipes/ai-suggestions", response_model=AISuggestionResponse)
def ai_suggestions(
    body: AISuggestionRequest,
    lang: Language = Depends(get_language),
) -> AISuggestionResponse:
    return generate_recipe_suggestions(body, lang)


@app.post("/api/recipes/smart-suggestions", response_model=list[Recipe])
def smart_suggestions_endpoint(
    body: SmartSuggestionRequest,
    lang: Language = Depends(get_language),
) -> list[Recipe]:
    return smart_suggestions(body, lang)


@app.post("/api/recipes/suggestions/by-mood", response_model=MoodSuggestionResponse)
def mood_suggestions_endpoint(body: MoodSuggestionRequest) -> MoodSuggestionResponse:
    return mood_suggestions(body.mood)


@app.get("/api/recipes/mood/{mood}", response_model=list[Recipe])
def recipes_by_mood_endpoint(mood: str) -> list[Recipe]:
    return recipes_by_mood(mood)


# ── Recipe endpoints ─────────────────────────────────────────────────────


@app.get("/api/recipes/with-reviews/{recipe_id}", response_model=RecipeWithReviews)
def recipe_with_reviews(recipe_id: str) -> RecipeWithReviews:
    return recipes.get_recipe_with_reviews(recipe_id)


@app.post("/api/recipes/reviews/{recipe_id}", response_model=Review, status_code=201)
def review_recipe(
    recipe_id: str,
    body: ReviewRequest,
    user: dict = Depends(require_user),
) -> Review:
    return reviews.create_review(user["id"], recipe_id, body.rating, body.comment)


@app.post("/api/recipes/{recipe_id}/rate", response_model=ReviewWriteResponse)
def rate_recipe(
    recipe_id: str,
    body: ReviewRequest,
    response: Response,
    user: dict = Depends(require_user),
) -> ReviewWriteResponse:
    review, created = reviews.submit_review(user["id"], recipe_id, body.rating, body.comment)
    response.status_code = 201 if created else 200
    return ReviewWriteResponse(
        message="Review created" if created else "Review updated",
        review=review,
    )


@app.post("/api/recipes", response_model=Recipe, status_code=201)
def create_recipe(body: RecipeCreate, admin: dict = Depends(require_admin)) -> Recipe:
    return recipes.create_recipe(body, admin["id"])


@app.put("/api/recipes/{recipe_id}", response_model=Recipe)
def update_recipe(
    recipe_id: str,
    body: RecipeUpdate,
    admin: dict = Depends(require_admin),
) -> Recipe:
    return recipes.update_recipe(recipe_id, body)


@app.delete("/api/recipes/{recipe_id}", response_model=MessageResponse)
def delete_recipe(recipe_id: str, admin: dict = Depends(require_admin)) -> MessageResponse:
    recipes.delete_recipe(recipe_id)
    return MessageResponse(message="Recipe deleted successfully!")


@app.get("/api/recipes", response_model=RecipePage)
def list_recipes(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str = "",
    mood: str | None = None,
    lang: Language | None = None,
    header_lang: Language = Depends(get_language),
) -> RecipePage:
    return recipes.list_recipes(lang or header_lang, page, limit, search, mood)


@app.get("/api/recipes/{recipe_id}", response_model=RecipeDetail)
def get_recipe(recipe_id: str) -> RecipeDetail:
    return recipes.get_recipe(recipe_id)


# ── Review endpoints ─────────────────────────────────────────────────────


@app.post("/api/reviews/{recipe_id}", response_model=Review, status_code=201)
def create_review(
    recipe_id: str,
    body: ReviewRequest,
    user: dict = Depends(require_user),
) -> Review:
    return reviews.create_review(user["id"], recipe_id, body.rating, body.comment)


@app.get("/api/reviews/{recipe_id}", response_model=ReviewPage)
def list_reviews(
    recipe_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=5, ge=1, le=100),
) -> ReviewPage:
    return reviews.list_reviews(recipe_id, page, limit)


@app.delete("/api/reviews/{review_id}", response_model=MessageResponse)
def delete_review(review_id: str, user: dict = Depends(require_user)) -> MessageResponse:
    reviews.delete_review(review_id, user)
    return MessageResponse(message="Review deleted!")
