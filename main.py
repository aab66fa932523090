from dotenv import load_dotenv
load_dotenv()
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from helpers.errors import DirectoryError, directory_error_handler
from helpers.logging_config import configure_logging
from helpers.settings import API_PREFIX, CORS_ORIGINS
from helpers.tortoise_config import lifespan
from controllers.user_controller import user_router
from controllers.availability_controller import availability_router


configure_logging()

app = FastAPI(lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DirectoryError, directory_error_handler)


app.include_router(user_router, prefix=API_PREFIX, tags=['Users'])
app.include_router(availability_router, prefix=API_PREFIX, tags=['Availability'])


@app.get('/')
def greetings():
    return {
        "Message": "Availability directory is up"
    }
