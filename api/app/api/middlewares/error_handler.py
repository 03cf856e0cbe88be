"""
Middleware para manejo centralizado de errores.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from loguru import logger


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware para capturar errores no manejados.
    
    El cliente siempre recibe un JSON con la forma de AppException; nunca
    un body vacio ni un stack trace.
    """
    
    async def dispatch(self, request: Request, call_next):
        """
        Procesa la petición y captura errores.
        
        Args:
            request: Petición HTTP
            call_next: Siguiente middleware/handler
            
        Returns:
            Response: Respuesta HTTP
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            logger.opt(exception=exc).error(f"Error no manejado en {request.url.path}: {exc}")
            
            # Respuesta de error generica
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "ok": False,
                    "error": "INTERNAL_SERVER_ERROR",
                    "message": "Ha ocurrido un error interno del servidor",
                    "details": {}
                }
            )
