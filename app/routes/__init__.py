from .bathroom_configuration import router as bathroom_configuration_router
from .contact import router as contact_router
from .debug_pdfs import router as debug_pdfs_router

__all__ = ["bathroom_configuration_router", "contact_router", "debug_pdfs_router"]
