# catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


TRACKS = {
    1: {"id": 1, "title": "Night Drive", "price": 1.99, "active": True},
    2: {"id": 2, "title": "Low Tide", "price": 2.49, "active": True},
    3: {"id": 3, "title": "Static Bloom", "price": 0.99, "active": True},
    4: {"id": 4, "title": "Withdrawn Demo", "price": 1.49, "active": False},
}


@app.get("/tracks/{track_id}")
def get_track(track_id: int):
    track = TRACKS.get(track_id)
    if not track:
        raise HTTPException(status_code=404, detail="Track not found")
    return track
