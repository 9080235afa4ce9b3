import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, configure_logging, get_settings
from dashboard import data
from dashboard.utils.api_utils import APIError, NotFoundError, handle_exception
from dashboard.utils.format_utils import generate_pagination
from dashboard.visualizer import get_customers_table, get_invoices_table, get_revenue_chart
from db.database import create_db_engine, get_engine, ping
from db.seed import seed_database

logger = logging.getLogger(__name__)

def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was built with"""
    return request.app.state.settings

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One pooled engine for the lifetime of the process
        app.state.engine = None
        app.state.engine_error = None
        try:
            app.state.engine = create_db_engine(
                settings.DATABASE_URL,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
                echo=settings.DEBUG,
            )
        except ArgumentError as e:
            # A malformed DATABASE_URL only fails the requests that need the database
            logger.error(f"Invalid DATABASE_URL: {str(e)}")
            app.state.engine_error = e
        try:
            yield
        finally:
            if app.state.engine is not None:
                app.state.engine.dispose()

    # Initialize FastAPI app
    app = FastAPI(
        title=settings.APP_NAME,
        description="Invoices, customers and revenue for the dashboard",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    register_exception_handlers(app)
    return app

def register_routes(app: FastAPI) -> None:
    @app.get("/")
    async def root(settings: Settings = Depends(get_app_settings)):
        """Health check endpoint"""
        return {
            "status": "ok",
            "message": f"{settings.APP_NAME} API is running",
            "version": settings.APP_VERSION
        }

    @app.get("/api/db-test")
    def db_test(request: Request, settings: Settings = Depends(get_app_settings)):
        """Check that the database answers a trivial query."""
        extra = {"your_project": settings.PROJECT_URL} if settings.PROJECT_URL else {}
        try:
            rows = ping(get_engine(request))
            return {
                "status": "success",
                "message": "Database connection successful!",
                "data": rows,
                **extra
            }
        except Exception as e:
            logger.error(f"Database connection failed: {str(e)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"status": "error", "message": str(e), **extra}
            )

    @app.get("/query")
    def sample_query(request: Request):
        """List invoices with an amount of exactly 666."""
        try:
            invoices = data.list_invoices_with_amount(get_engine(request), 666)
            return jsonable_encoder(invoices)
        except Exception as e:
            logger.error(f"Sample query failed: {str(e)}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": str(e)})

    @app.get("/seed")
    def seed(request: Request, settings: Settings = Depends(get_app_settings)):
        """Create the tables if needed and load the placeholder rows."""
        try:
            seed_database(
                get_engine(request),
                max_workers=settings.SEED_MAX_WORKERS,
                bcrypt_rounds=settings.BCRYPT_ROUNDS,
            )
            return {"message": "Database seeded successfully"}
        except Exception as e:
            logger.error(f"Seeding failed: {str(e)}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": str(e)})

    # Dashboard endpoints
    @app.get("/dashboard/revenue")
    def revenue(engine: Engine = Depends(get_engine)):
        return data.fetch_revenue(engine)

    @app.get("/dashboard/revenue-chart")
    def revenue_chart(engine: Engine = Depends(get_engine)):
        return get_revenue_chart(data.fetch_revenue(engine))

    @app.get("/dashboard/latest-invoices")
    def latest_invoices(engine: Engine = Depends(get_engine)):
        return data.fetch_latest_invoices(engine)

    @app.get("/dashboard/cards")
    def cards(engine: Engine = Depends(get_engine)):
        return data.fetch_card_data(engine)

    @app.get("/dashboard/invoices")
    def invoices(
        query: str = "",
        page: int = Query(1, ge=1),
        engine: Engine = Depends(get_engine)
    ):
        """
        One page of invoices matching the search box, plus pagination hints.
        """
        rows = data.fetch_filtered_invoices(engine, query, page)
        total_pages = data.fetch_invoices_pages(engine, query)
        return {
            "invoices": get_invoices_table(rows),
            "current_page": page,
            "total_pages": total_pages,
            "pagination": generate_pagination(page, total_pages),
        }

    @app.get("/dashboard/invoices/pages")
    def invoices_pages(query: str = "", engine: Engine = Depends(get_engine)):
        return {"total_pages": data.fetch_invoices_pages(engine, query)}

    @app.get("/dashboard/invoices/{invoice_id}")
    def invoice(invoice_id: str, engine: Engine = Depends(get_engine)):
        found = data.fetch_invoice_by_id(engine, invoice_id)
        if found is None:
            raise NotFoundError("Invoice", invoice_id)
        return found

    @app.get("/dashboard/customers")
    def customers(engine: Engine = Depends(get_engine)):
        return data.fetch_customers(engine)

    @app.get("/dashboard/customers/table")
    def customers_table(query: str = "", engine: Engine = Depends(get_engine)):
        return get_customers_table(data.fetch_filtered_customers(engine, query))

def register_exception_handlers(app: FastAPI) -> None:
    # Error handlers
    @app.exception_handler(APIError)
    async def api_error_handler(request, exc):
        return handle_exception(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        return handle_exception(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return handle_exception(exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        return handle_exception(exc)

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
