"""FastAPI application for the Food-Com Store backend."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Header, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.config import LOG_FORMAT, LOG_LEVEL, REVIEW_PAGE_SIZE
from src.errors import QueryFailure, StoreFailure, StorefrontError, Unauthorized
from src.models.queries import QueryParams
from src.services.auth_service import auth_service
from src.services.category_service import category_service
from src.services.product_query_service import product_query_service
from src.services.review_service import review_service
from src.services.session import SessionContext, SessionUser, log_session_change

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Food-Com Store API",
    description="Storefront backend with product listing, reviews and authentication",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if isinstance(exc, QueryFailure):
        details = str(exc.cause) if exc.cause else exc.message
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "details": details})
    if isinstance(exc, StoreFailure):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    fields = ", ".join(str(err["loc"][-1]) for err in exc.errors())
    logger.info(f"Rejected request to {request.url.path}: invalid {fields}")
    return JSONResponse(status_code=400, content={"message": f"Invalid value for {fields}"})


def new_session() -> SessionContext:
    session = SessionContext()
    session.subscribe(log_session_change)
    return session


def get_session(authorization: Optional[str] = Header(None)) -> SessionContext:
    """Build the session for this request from the bearer token, if any."""
    session = new_session()
    if not authorization:
        return session

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise Unauthorized("Invalid authorization header")
    claims = auth_service.verify_token(token)
    session.sign_in(SessionUser(user_id=claims["sub"], email=claims.get("email"), name=claims.get("name")))
    return session


# Pydantic models for request bodies. Fields are optional so missing values
# get the storefront's own 400 messages rather than a schema error.
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReviewRequest(CamelModel):
    reviewer_name: Optional[str] = None
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewUpdateRequest(CamelModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class SignupRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    username: Optional[str] = None
    password: Optional[str] = None


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Food-Com Store API"}


# Product Endpoints
@app.get("/api/products")
async def list_products(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    order: Optional[str] = Query(None),
    seq: Optional[int] = Query(None),
):
    """List products with filtering, sorting and pagination."""
    params = QueryParams.from_request(page, limit, category, search, sort_by, order)
    try:
        result = product_query_service.list_products(params)
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error listing products: {e}")
        raise QueryFailure("Failed to fetch products", cause=e) from e

    response = result.to_response("products")
    # Echoed so callers can drop responses to superseded requests
    if seq is not None:
        response["requestSeq"] = seq
    return response


@app.get("/api/products/{product_id}")
async def get_product(product_id: str):
    """Get a single product with its reviews."""
    try:
        return product_query_service.get_product(product_id).to_response()
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error fetching product: {e}")
        raise StoreFailure("Failed to fetch product", cause=e) from e


@app.get("/api/categories")
async def list_categories():
    """List product categories."""
    try:
        return [category.model_dump() for category in category_service.list_categories()]
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        raise StoreFailure("Failed to fetch categories", cause=e) from e


# Review Endpoints
@app.get("/api/products/{product_id}/reviews")
async def list_reviews(
    product_id: str,
    page: int = Query(1),
    limit: int = Query(REVIEW_PAGE_SIZE),
):
    """List a product's reviews, newest first."""
    try:
        return review_service.list_reviews(product_id, page, limit).to_response("reviews")
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error fetching reviews: {e}")
        raise StoreFailure("Failed to fetch reviews", cause=e) from e


@app.post("/api/products/{product_id}/reviews", status_code=201)
async def add_review(product_id: str, request: ReviewRequest, session: SessionContext = Depends(get_session)):
    """Add a review to a product."""
    if not request.reviewer_name or not request.rating or not request.comment:
        return _message(400, "All fields are required")
    user = session.require_user()
    try:
        product = review_service.add_review(
            product_id, user.user_id, request.reviewer_name, request.rating, request.comment
        )
        return product.to_response()
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error adding review: {e}")
        raise StoreFailure("Failed to add review", cause=e) from e


@app.put("/api/products/{product_id}/reviews/{review_id}")
async def update_review(
    product_id: str,
    review_id: str,
    request: ReviewUpdateRequest,
    session: SessionContext = Depends(get_session),
):
    """Update a review written by the signed-in user."""
    if not request.rating or not request.comment:
        return _message(400, "Rating and comment are required")
    user = session.require_user()
    try:
        review = review_service.edit_review(product_id, review_id, user.user_id, request.rating, request.comment)
        return {"message": "Review updated successfully", "review": review.model_dump(by_alias=True)}
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error updating review: {e}")
        raise StoreFailure("Failed to update review", cause=e) from e


@app.delete("/api/products/{product_id}/reviews")
async def delete_reviews(product_id: str, session: SessionContext = Depends(get_session)):
    """Delete every review the signed-in user wrote on a product."""
    user = session.require_user()
    try:
        deleted = review_service.delete_reviews(product_id, user.user_id)
        return {"message": "Reviews deleted successfully", "deletedCount": deleted}
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error deleting reviews: {e}")
        raise StoreFailure("Failed to delete reviews", cause=e) from e


# Auth Endpoints
@app.post("/api/auth/signup", status_code=201)
async def signup(request: SignupRequest):
    """Register a new user."""
    fields = request.model_dump()
    if not all(fields.values()):
        return _message(400, "All fields are required")
    try:
        profile = auth_service.sign_up(**fields)
        return {"message": "User registered successfully", "user": profile.model_dump(by_alias=True)}
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error registering user: {e}")
        raise StoreFailure("Error registering user", cause=e) from e


@app.post("/api/auth/login")
async def login(request: LoginRequest):
    """Log in with username and password."""
    if not request.username or not request.password:
        return _message(400, "Username and password are required")
    try:
        profile, token = auth_service.log_in(request.username, request.password)
    except StorefrontError:
        raise
    except Exception as e:
        logger.error(f"Error logging in user: {e}")
        raise StoreFailure("Error logging in user", cause=e) from e

    logger.info(f"User {profile.username} logged in")
    return {"message": "Login successful", "user": profile.model_dump(by_alias=True), "token": token}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, reload=True)
