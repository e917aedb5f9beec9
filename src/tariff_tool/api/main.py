from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional

from ..engine import HouseholdInput, InvalidInputError, MealCategory, cost_curve
from .state import catalogs, engine, settings

app = FastAPI(
    title="Meal Tariff API",
    description="Recommends the cheapest way to pay for canteen meals",
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


class HouseholdRequest(BaseModel):
    income: float = Field(ge=0)
    scholarship_eligible: bool = False
    preferred_category: MealCategory = MealCategory.COMPLETE
    meals_per_day: Optional[Literal[1, 2]] = None


class CalcRequest(HouseholdRequest):
    total_meals: int = Field(gt=0)


class CurveRequest(HouseholdRequest):
    max_meals: Optional[int] = Field(default=None, gt=0, le=10_000)
    step: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_points(self):
        max_meals = self.max_meals or settings.curve_max_meals
        step = self.step or settings.curve_step
        if max_meals // step > settings.curve_max_points:
            raise ValueError(f"cost curve limited to {settings.curve_max_points} points")
        return self


def _household(req: HouseholdRequest, total_meals: int) -> HouseholdInput:
    return HouseholdInput(
        income=req.income,
        total_meals=total_meals,
        scholarship_eligible=req.scholarship_eligible,
        preferred_category=req.preferred_category,
        meals_per_day=req.meals_per_day,
    )


@app.get("/")
async def root():
    return {"status": "online", "message": "Meal Tariff API Active"}


@app.post("/calculate")
async def calculate(req: CalcRequest):
    try:
        result = engine.evaluate(_household(req, req.total_meals), catalogs)
        return jsonable_encoder(result)
    except InvalidInputError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/catalogs")
async def get_catalogs():
    return catalogs.to_dict()


@app.post("/cost-curve")
def get_cost_curve(req: CurveRequest):
    try:
        # total_meals is replaced at every point of the sweep
        df = cost_curve(engine, _household(req, 1), catalogs, max_meals=req.max_meals, step=req.step)
        df = df.astype(object).where(df.notna(), None)
        return df.to_dict(orient="records")
    except InvalidInputError as e:
        raise HTTPException(status_code=e.http_status, detail=e.to_dict())
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "catalog_hash": catalogs.catalog_hash,
        "catalog_dir": str(settings.catalog_dir),
        "income_brackets": len(catalogs.brackets),
        "flat_tariffs": len(catalogs.flat_tariffs),
        "bundles": len(catalogs.bundles),
    }
