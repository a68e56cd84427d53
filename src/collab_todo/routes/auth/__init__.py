from collab_todo.routes.auth.routes import router

__all__ = ["router"]
