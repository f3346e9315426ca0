from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from campus_notify.core.config import settings
from campus_notify.core.logging import configure_logging
from campus_notify.endpoints import notification, notification_settings, messaging, forum, assignment, exam
from fastapi.exceptions import RequestValidationError
from campus_notify.middleware.exceptions import global_exception_handler, validation_exception_handler
from campus_notify.middleware.logging import RequestLoggingMiddleware
from campus_notify.core.scheduler import start_scheduler, stop_scheduler

configure_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Settings routes must be registered before /notifications/{notification_id}
app.include_router(notification_settings.router, prefix="/notifications/settings", tags=["Notification Settings"])
app.include_router(notification.router, prefix="/notifications", tags=["Notifications"])
app.include_router(messaging.router, prefix="/messages", tags=["Messages"])
app.include_router(forum.router, prefix="/forum", tags=["Forum"])
app.include_router(assignment.router, prefix="/assignments", tags=["Assignments"])
app.include_router(exam.router, prefix="/exams", tags=["Tests"])

@app.on_event("startup")
async def startup_event():
    start_scheduler()

@app.on_event("shutdown")
async def shutdown_event():
    stop_scheduler()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
