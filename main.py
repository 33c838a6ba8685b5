import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.errors import AppError
from app.routers import auth, clientes, empresa, pedidos
from app.services.auth_service import get_current_user
from app.services.cache_service import cache_service
from app.utils.rate_limit import limiter
from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Conectar a Redis al iniciar la aplicación
    await cache_service.connect()
    yield
    # shutdown
    await cache_service.close()


app = FastAPI(
    title="BM Iluminación API",
    description="API de gestión de clientes y pedidos de BM Iluminación",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# Configurar rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    message = details[0]["msg"] if details else "Datos inválidos"
    return JSONResponse(status_code=400, content={"error": message, "details": details})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("❌ Error no controlado en %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Error del servidor"})


# Configurar CORS
if settings.DEBUG:
    # En desarrollo, permitir todos los orígenes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    # En producción, solo el frontend configurado
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

# Incluir routers (todo salvo /auth exige token)
protected = [Depends(get_current_user)]
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(clientes.router, prefix=f"{settings.API_PREFIX}/clientes", tags=["clientes"], dependencies=protected)
app.include_router(pedidos.router, prefix=f"{settings.API_PREFIX}/pedidos", tags=["pedidos"], dependencies=protected)
app.include_router(empresa.router, prefix=f"{settings.API_PREFIX}/empresa", tags=["empresa"], dependencies=protected)


@app.get("/")
async def root():
    return {
        "message": "BM Iluminación API funcionando!",
        "docs": "/docs",
        "status": "activo"
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "bm-iluminacion-api"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="debug" if settings.DEBUG else "info")
