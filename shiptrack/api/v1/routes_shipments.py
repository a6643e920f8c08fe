from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from shiptrack.api.deps import get_db, get_current_identity, valid_shipment_id
from shiptrack.api.v1.schemas import CreateShipment, StatusUpdate, ShipmentOut, ShipmentPage, ShipmentStats
from shiptrack.security.identity import AuthContext
from shiptrack.services import shipments as svc

router = APIRouter()  # main.py mounts at /api/shipments

# fixed paths are declared before /{shipment_id}
@router.get("/stats", response_model=ShipmentStats)
def shipment_stats(identity: AuthContext = Depends(get_current_identity), db: Session = Depends(get_db)):
    return svc.shipment_stats(db, identity)

@router.get("", response_model=ShipmentPage)
def list_shipments(
    page: int = 1,
    page_size: int = Query(default=svc.DEFAULT_PAGE_SIZE, alias="pageSize"),
    status: Optional[str] = None,
    q: Optional[str] = None,
    identity: AuthContext = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return svc.list_shipments(db, identity, page=page, page_size=page_size, status=status, q=q)

@router.post("", response_model=ShipmentOut, status_code=status.HTTP_201_CREATED)
def create_shipment(payload: CreateShipment, identity: AuthContext = Depends(get_current_identity), db: Session = Depends(get_db)):
    return svc.create_shipment(
        db,
        identity,
        customer_name=payload.customer_name,
        current_location=payload.current_location,
        eta=payload.eta,
        status=payload.status,
        tracking_number=payload.tracking_number,
    )

@router.get("/{shipment_id}", response_model=ShipmentOut)
def get_shipment(
    identity: AuthContext = Depends(get_current_identity),
    shipment_id: str = Depends(valid_shipment_id),
    db: Session = Depends(get_db),
):
    return svc.get_shipment(db, identity, shipment_id)

@router.patch("/{shipment_id}/status", response_model=ShipmentOut)
def update_shipment_status(
    payload: StatusUpdate,
    identity: AuthContext = Depends(get_current_identity),
    shipment_id: str = Depends(valid_shipment_id),
    db: Session = Depends(get_db),
):
    return svc.update_shipment_status(db, identity, shipment_id, payload.status)

@router.delete("/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shipment(
    identity: AuthContext = Depends(get_current_identity),
    shipment_id: str = Depends(valid_shipment_id),
    db: Session = Depends(get_db),
):
    svc.delete_shipment(db, identity, shipment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
