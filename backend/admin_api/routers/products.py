from __future__ import annotations

from typing import Annotated, ClassVar

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..db.engine import get_db
from ..db.query_spec import FilterSpec, Predicate, as_int
from ..repositories.resources_repo import ProductsRepository
from .params import Numeric, PageParams, Text64, Text255

router = APIRouter(tags=["products"])


class ProductFilters(PageParams):
    name: Text64 = ""
    price: Numeric = ""
    remarks: Text255 = ""
    quantity: Numeric = ""

    spec: ClassVar[FilterSpec] = FilterSpec(
        predicates=(
            Predicate("name", "name", "like"),
            Predicate("price", "price", cast=as_int),
            Predicate("remarks", "remarks", "like"),
            Predicate("quantity", "quantity", cast=as_int),
        )
    )


class ProductRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)
    price: int = Field(..., ge=0)
    remarks: str = Field("", max_length=255)
    quantity: int = Field(..., ge=0)


@router.get("/products")
def list_products(params: Annotated[ProductFilters, Query()], db: Session = Depends(get_db)):
    products = ProductsRepository(db).list(ProductFilters.spec, params)
    return {"total": len(products), "products": [p.to_dict() for p in products]}


@router.get("/products/{product_id}")
def get_product(product_id: str, db: Session = Depends(get_db)):
    return ProductsRepository(db).get(product_id).to_dict()


@router.post("/products", status_code=201)
def create_product(body: ProductRequest, db: Session = Depends(get_db)):
    return ProductsRepository(db).create(body.model_dump()).to_dict()


@router.put("/products/{product_id}", status_code=202)
def update_product(product_id: str, body: ProductRequest, db: Session = Depends(get_db)):
    return ProductsRepository(db).update(product_id, body.model_dump()).to_dict()


@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    ProductsRepository(db).delete(product_id)
    return Response(status_code=204)
