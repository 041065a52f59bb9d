__version__ = "1.0.0"
__description__ = "plumpapi : CRUD and relationship routes for plump models on FastAPI"
