# delivery_analytics/store/router.py
"""API router for the store module."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from delivery_analytics.core.dependencies import SessionDep, get_store_service
from delivery_analytics.core.exceptions import DatasetLoadError, DuplicateRecordError, ReferentialIntegrityError
from delivery_analytics.store.loader import DatasetLoader
from delivery_analytics.store.service import StoreService
from delivery_analytics.store.schemas import (
    RestaurantCreate, RestaurantRead,
    CustomerCreate, CustomerRead,
    RiderCreate, RiderRead,
    OrderCreate, OrderRead,
    DeliveryCreate, DeliveryRead,
    DatasetLoad, StoreSummary,
)

router = APIRouter(prefix="/store", tags=["Store"])


def _create(service, data):
    """Run a create, translating integrity failures into HTTP errors."""
    try:
        return service.create(data)
    except DuplicateRecordError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ReferentialIntegrityError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _get_or_404(service, record_id: int, entity: str):
    record = service.get_by_id(record_id)
    if not record:
        raise HTTPException(status_code=404, detail=f"{entity} not found")
    return record


# ===== SUMMARY & BULK LOAD =====

@router.get("/summary", response_model=StoreSummary)
def get_store_summary(service: StoreService = Depends(get_store_service)) -> StoreSummary:
    """Row counts for every table."""
    return service.get_summary()


@router.post("/load", response_model=StoreSummary, status_code=201)
def load_dataset(dataset: DatasetLoad, db: SessionDep) -> StoreSummary:
    """Load a full dataset atomically."""
    try:
        return DatasetLoader(db).load(dataset)
    except DatasetLoadError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ===== RESTAURANT ENDPOINTS =====

@router.get("/restaurants", response_model=List[RestaurantRead])
def get_restaurants(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    city: Optional[str] = Query(None, description="Filter by city"),
    service: StoreService = Depends(get_store_service),
) -> List[RestaurantRead]:
    return service.restaurants.get_all(skip=skip, limit=limit, city=city)


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantRead)
def get_restaurant(restaurant_id: int, service: StoreService = Depends(get_store_service)) -> RestaurantRead:
    return _get_or_404(service.restaurants, restaurant_id, "Restaurant")


@router.post("/restaurants", response_model=RestaurantRead, status_code=201)
def create_restaurant(data: RestaurantCreate, service: StoreService = Depends(get_store_service)) -> RestaurantRead:
    return _create(service.restaurants, data)


# ===== CUSTOMER ENDPOINTS =====

@router.get("/customers", response_model=List[CustomerRead])
def get_customers(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: StoreService = Depends(get_store_service),
) -> List[CustomerRead]:
    return service.customers.get_all(skip=skip, limit=limit)


@router.get("/customers/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: int, service: StoreService = Depends(get_store_service)) -> CustomerRead:
    return _get_or_404(service.customers, customer_id, "Customer")


@router.post("/customers", response_model=CustomerRead, status_code=201)
def create_customer(data: CustomerCreate, service: StoreService = Depends(get_store_service)) -> CustomerRead:
    return _create(service.customers, data)


# ===== RIDER ENDPOINTS =====

@router.get("/riders", response_model=List[RiderRead])
def get_riders(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    service: StoreService = Depends(get_store_service),
) -> List[RiderRead]:
    return service.riders.get_all(skip=skip, limit=limit)


@router.get("/riders/{rider_id}", response_model=RiderRead)
def get_rider(rider_id: int, service: StoreService = Depends(get_store_service)) -> RiderRead:
    return _get_or_404(service.riders, rider_id, "Rider")


@router.post("/riders", response_model=RiderRead, status_code=201)
def create_rider(data: RiderCreate, service: StoreService = Depends(get_store_service)) -> RiderRead:
    return _create(service.riders, data)


# ===== ORDER ENDPOINTS =====

@router.get("/orders", response_model=List[OrderRead])
def get_orders(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    customer_id: Optional[int] = Query(None, description="Filter by customer"),
    restaurant_id: Optional[int] = Query(None, description="Filter by restaurant"),
    service: StoreService = Depends(get_store_service),
) -> List[OrderRead]:
    return service.orders.get_all(
        skip=skip, limit=limit, customer_id=customer_id, restaurant_id=restaurant_id
    )


@router.get("/orders/{order_id}", response_model=OrderRead)
def get_order(order_id: int, service: StoreService = Depends(get_store_service)) -> OrderRead:
    return _get_or_404(service.orders, order_id, "Order")


@router.post("/orders", response_model=OrderRead, status_code=201)
def create_order(data: OrderCreate, service: StoreService = Depends(get_store_service)) -> OrderRead:
    return _create(service.orders, data)


# ===== DELIVERY ENDPOINTS =====

@router.get("/deliveries", response_model=List[DeliveryRead])
def get_deliveries(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    rider_id: Optional[int] = Query(None, description="Filter by rider"),
    service: StoreService = Depends(get_store_service),
) -> List[DeliveryRead]:
    return service.deliveries.get_all(skip=skip, limit=limit, rider_id=rider_id)


@router.get("/deliveries/{delivery_id}", response_model=DeliveryRead)
def get_delivery(delivery_id: int, service: StoreService = Depends(get_store_service)) -> DeliveryRead:
    return _get_or_404(service.deliveries, delivery_id, "Delivery")


@router.post("/deliveries", response_model=DeliveryRead, status_code=201)
def create_delivery(data: DeliveryCreate, service: StoreService = Depends(get_store_service)) -> DeliveryRead:
    return _create(service.deliveries, data)
