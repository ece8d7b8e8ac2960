from .relay import HealthResponse, ErrorResponse
