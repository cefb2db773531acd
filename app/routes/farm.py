from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from datetime import datetime

from ..schemas import FarmCreate, Farm as FarmSchema, CropCreate, Crop as CropSchema, CropStatusEnum
from ..scheduling.crops import harvest_label
from ..storage import FarmStore, get_store, to_crop_record

router = APIRouter()


def _crop_view(row, farm_names: dict, now: datetime) -> CropSchema:
    view = CropSchema.model_validate(row)
    view.farm_name = farm_names.get(row.farm_id, "Unknown Farm")
    view.days_to_harvest = harvest_label(to_crop_record(row), now)
    return view


# --- FARMS ---

@router.post("/farms", response_model=FarmSchema, status_code=status.HTTP_201_CREATED)
def create_farm(farm: FarmCreate, store: FarmStore = Depends(get_store)):
    return store.create_farm(farm)

@router.get("/farms", response_model=List[FarmSchema])
def get_farms(store: FarmStore = Depends(get_store)):
    return store.all_farms()

@router.get("/farms/{farm_id}", response_model=FarmSchema)
def get_farm(farm_id: int, store: FarmStore = Depends(get_store)):
    farm = store.get_farm(farm_id)
    if not farm:
        raise HTTPException(status_code=404, detail="Farm not found")
    return farm

@router.put("/farms/{farm_id}", response_model=FarmSchema)
def update_farm(farm_id: int, updated_farm: FarmCreate, store: FarmStore = Depends(get_store)):
    farm = store.update_farm(farm_id, updated_farm)
    if not farm:
        raise HTTPException(status_code=404, detail="Farm not found")
    return farm

@router.delete("/farms/{farm_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_farm(farm_id: int, store: FarmStore = Depends(get_store)):
    if not store.delete_farm(farm_id):
        raise HTTPException(status_code=404, detail="Farm not found")
    return None


# --- CROPS ---

@router.post("/crops", response_model=CropSchema, status_code=status.HTTP_201_CREATED)
def create_crop(crop: CropCreate, store: FarmStore = Depends(get_store)):
    # Check the farm exists before planting on it
    if not store.get_farm(crop.farm_id):
        raise HTTPException(status_code=404, detail="Farm not found")
    row = store.create_crop(crop)
    return _crop_view(row, {f.id: f.name for f in store.list_farms()}, datetime.now())

@router.get("/crops", response_model=List[CropSchema])
def get_crops(
    farm_id: Optional[int] = None,
    status: Optional[CropStatusEnum] = None,
    store: FarmStore = Depends(get_store)
):
    farm_names = {f.id: f.name for f in store.list_farms()}
    now = datetime.now()
    rows = store.query_crops(farm_id=farm_id, status=status.value if status else None)
    return [_crop_view(row, farm_names, now) for row in rows]

@router.get("/crops/{crop_id}", response_model=CropSchema)
def get_crop(crop_id: int, store: FarmStore = Depends(get_store)):
    row = store.get_crop(crop_id)
    if not row:
        raise HTTPException(status_code=404, detail="Crop not found")
    return _crop_view(row, {f.id: f.name for f in store.list_farms()}, datetime.now())

@router.put("/crops/{crop_id}", response_model=CropSchema)
def update_crop(crop_id: int, updated_crop: CropCreate, store: FarmStore = Depends(get_store)):
    row = store.update_crop(crop_id, updated_crop)
    if not row:
        raise HTTPException(status_code=404, detail="Crop not found")
    return _crop_view(row, {f.id: f.name for f in store.list_farms()}, datetime.now())

@router.delete("/crops/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_crop(crop_id: int, store: FarmStore = Depends(get_store)):
    if not store.delete_crop(crop_id):
        raise HTTPException(status_code=404, detail="Crop not found")
    return None
