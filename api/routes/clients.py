"""
api/routes/clients.py -- Client record CRUD routes.

Routes:
  POST   /clients              -- create client; 201 {message, client}
  GET    /clients              -- list every client; 200 [client, ...]
  GET    /clients/{client_id}  -- single client; 200 client | 404
  PUT    /clients/{client_id}  -- full replacement; 200 {message, client} | 404
  DELETE /clients/{client_id}  -- permanent delete; 200 {message} | 404

All routes require a valid token (router-level dependency). Store failures,
including a duplicate email, come back as the operation's generic 500.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.errors import error_response
from api.models import ClientMutationResponse, ClientResponse, ClientWrite, MessageResponse
from auth.dependencies import require_token
from core.errors import Err
from crm.models import Client
from crm.store import ClientStore

# Router-level dependency applies to every route registered on this router,
# so individual handlers don't each need to repeat Depends(require_token).
router = APIRouter(dependencies=[Depends(require_token)])

_NOT_FOUND = "Client not found."


def _store(request: Request) -> ClientStore:
    return request.app.state.client_store


@router.post("/clients", response_model=ClientMutationResponse, status_code=201)
def create_client(request: Request, body: ClientWrite) -> ClientMutationResponse | JSONResponse:
    """Create a client. The email must not belong to another client."""
    result = _store(request).create_client(Client(name=body.name, email=body.email, phone=body.phone))
    if isinstance(result, Err):
        return error_response(result, failure="Failed to create client.")
    return ClientMutationResponse(message="Client created", client=ClientResponse.from_client(result.value))


@router.get("/clients", response_model=list[ClientResponse])
def list_clients(request: Request) -> list[ClientResponse] | JSONResponse:
    result = _store(request).list_clients()
    if isinstance(result, Err):
        return error_response(result, failure="Failed to fetch clients.")
    return [ClientResponse.from_client(c) for c in result.value]


@router.get("/clients/{client_id}", response_model=ClientResponse)
def get_client(request: Request, client_id: int) -> ClientResponse | JSONResponse:
    result = _store(request).get_client(client_id)
    if isinstance(result, Err):
        return error_response(result, failure="Failed to fetch client.", not_found=_NOT_FOUND)
    return ClientResponse.from_client(result.value)


@router.put("/clients/{client_id}", response_model=ClientMutationResponse)
def update_client(request: Request, client_id: int, body: ClientWrite) -> ClientMutationResponse | JSONResponse:
    """Replace name, email and phone of an existing client.

    Fields are not merged with the stored record: an omitted phone is cleared.
    """
    result = _store(request).update_client(client_id, name=body.name, email=body.email, phone=body.phone)
    if isinstance(result, Err):
        return error_response(result, failure="Failed to update client.", not_found=_NOT_FOUND)
    return ClientMutationResponse(message="Client updated", client=ClientResponse.from_client(result.value))


@router.delete("/clients/{client_id}", response_model=MessageResponse)
def delete_client(request: Request, client_id: int) -> MessageResponse | JSONResponse:
    result = _store(request).delete_client(client_id)
    if isinstance(result, Err):
        return error_response(result, failure="Failed to delete client.", not_found=_NOT_FOUND)
    return MessageResponse(message="Client deleted")
