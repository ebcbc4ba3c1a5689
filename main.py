from fastapi import FastAPI

from db import DB_PATH, init_db
from generation_router import router as generation_router

app = FastAPI(title="StellArb generation engine")
app.include_router(generation_router)


@app.on_event("startup")
def _startup():
    conn = init_db()
    conn.close()
    print(f"[startup] recruiter pool store ready at {DB_PATH}")
