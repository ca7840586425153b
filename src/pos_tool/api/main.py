from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional

from pos_tool.engine import Item, WeightedItem, scheme_from_config
from pos_tool.store import Store
from pos_tool.api import state

app = FastAPI(
    title="POS Register API",
    description="Backend API for scanning items and pricing receipts",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

store = Store()


class ScanRequest(BaseModel):
    """Either price_each, or price_per_unit together with weight."""
    name: str
    price_each: Optional[int] = None
    price_per_unit: Optional[int] = None
    weight: Optional[float] = None


class SchemeCreate(BaseModel):
    type: str
    item_name: Optional[str] = None
    group_names: Optional[list[str]] = None
    buy: Optional[int] = None
    pay: Optional[int] = None
    discount_percent: Optional[float] = None
    special_price: Optional[int] = None


def _build_item(req: ScanRequest):
    if req.price_each is not None:
        return Item(name=req.name, price_each=req.price_each)
    if req.price_per_unit is not None and req.weight is not None:
        return WeightedItem(name=req.name, price_per_unit=req.price_per_unit, weight=req.weight)
    raise ValueError("provide price_each, or price_per_unit and weight")


def _scheme_payload(scheme) -> dict:
    return {
        "type": scheme.scheme_type,
        "description": scheme.describe(),
        "config": scheme.to_config(),
        "state": scheme.state(),
    }


@app.get("/")
async def root():
    return {"status": "online", "message": "POS Register API Active", "store_version": store.version}

@app.post("/scan")
async def scan_item(req: ScanRequest):
    try:
        item = _build_item(req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    with state.register_lock:
        state.register.scan(item)
        receipt = state.register.receipt
        return {
            "name": item.name,
            "price": item.price(),
            "item_count": len(receipt),
            "raw_total": receipt.total(),
        }

@app.get("/subtotal")
async def get_subtotal():
    # Evaluating the schemes spends any coupon or rain check that matches
    with state.register_lock:
        quote = state.register.quote()
    return {**jsonable_encoder(quote), "savings": quote.savings}

@app.post("/total")
async def finalize():
    with state.register_lock:
        receipt = state.register.total()
    return {
        "items": [{"name": item.name, "price": item.price()} for item in receipt.items()],
        "total": receipt.total(),
        "receipt_text": receipt.output(),
    }

@app.get("/schemes")
async def list_schemes():
    with state.register_lock:
        return [_scheme_payload(scheme) for scheme in state.register.pricing_schemes]

@app.post("/schemes")
async def add_scheme(req: SchemeCreate):
    try:
        scheme = scheme_from_config(req.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    with state.register_lock:
        state.register.add_pricing_scheme(scheme)
        position = len(state.register.pricing_schemes)
    return {**_scheme_payload(scheme), "position": position}

@app.post("/system/reload")
async def reload_schemes():
    register, scheme_loader = state.reload_register()
    return {
        "schemes_loaded": scheme_loader.loaded,
        "schemes_count": len(register.pricing_schemes),
        "loader_error": scheme_loader.error,
    }

@app.get("/system/status")
async def get_status():
    compiled = state.settings.compiled_schemes
    with state.register_lock:
        schemes_count = len(state.register.pricing_schemes)
        scheme_loader = state.scheme_loader
    return {
        "register_active": True,
        "schemes_loaded": scheme_loader.loaded,
        "schemes_count": schemes_count,
        "loader_error": scheme_loader.error,
        "schemes_last_compile": compiled.stat().st_mtime if compiled.exists() else None,
    }
