"""View layer (routing) for the Pickleball Club backend."""


from .health import router as health_router


__all__ = [
    "health_router",
]
