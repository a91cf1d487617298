"""FastAPI web server for the socialchain runtime."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from socialchain import Runtime, SocialConfig, __version__
from socialchain.core.derivation import derive
from socialchain.core.exporter import to_dict
from socialchain.exceptions import ArgumentError
from socialchain.models.address import Address
from socialchain.models.result import InstructionResult


# Request/Response models
class InitializeRequest(BaseModel):
    """Request body for account initialization."""

    role: str = Field(..., description="Account role: 'profile' or 'post'")


class FollowRequest(BaseModel):
    """Request body for follow and unfollow."""

    target: str = Field(..., description="Base58 address of the identity to (un)follow")


class PostRequest(BaseModel):
    """Request body for posting."""

    content: str = Field(..., description="Post content")


class FundRequest(BaseModel):
    """Request body for crediting an identity."""

    lamports: Optional[int] = Field(
        default=None,
        ge=0,
        description="Lamports to credit, server default if omitted",
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    program_id: str
    timestamp: str


class DeriveResponse(BaseModel):
    """Derived account address."""

    owner: str
    role: str
    index: Optional[int] = None
    address: str
    nonce: int


ERROR_STATUS = {
    "DecodeError": 422,
    "ArgumentError": 400,
    "CapacityExceededError": 409,
    "InvalidSeedsError": 400,
    "AuthorizationError": 403,
    "AllocationError": 409,
    "StoreError": 503,
}

# Global runtime instance
_runtime: Optional[Runtime] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage runtime lifecycle."""
    global _runtime
    _runtime = Runtime(SocialConfig())
    await _runtime.__aenter__()
    yield
    await _runtime.__aexit__(None, None, None)
    _runtime = None


app = FastAPI(
    title="socialchain API",
    description="Follow graph and post logs stored in derived ledger accounts",
    version=__version__,
    lifespan=lifespan,
)


def _runtime_or_503() -> Runtime:
    if _runtime is None:
        raise HTTPException(status_code=503, detail="Runtime not started")
    return _runtime


def _parse_address(value: str) -> Address:
    try:
        return Address(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _respond(result: InstructionResult) -> dict:
    if not result.success:
        raise HTTPException(
            status_code=ERROR_STATUS.get(result.error_type, 400),
            detail={"error_type": result.error_type, "message": result.error_message},
        )
    return to_dict(result)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Check API health status."""
    runtime = _runtime_or_503()
    return HealthResponse(
        status="healthy",
        version=__version__,
        program_id=str(runtime.program_id),
        timestamp=datetime.now().isoformat(),
    )


@app.get("/api/derive/{owner}/{role}", response_model=DeriveResponse, tags=["Accounts"])
async def derive_address(
    owner: str,
    role: str,
    index: Optional[int] = Query(None, ge=0, description="Post sequence index"),
):
    """Derive the address of an identity's profile, post log or post account."""
    runtime = _runtime_or_503()
    try:
        address, nonce = derive(_parse_address(owner), role, runtime.program_id, index=index)
    except ArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return DeriveResponse(owner=owner, role=role, index=index, address=str(address), nonce=nonce)


@app.post("/api/accounts/{owner}/fund", tags=["Accounts"])
async def fund_account(owner: str, request: FundRequest):
    """Credit lamports to an identity."""
    state = await _runtime_or_503().fund(_parse_address(owner), request.lamports)
    return {"address": str(state.address), "lamports": state.lamports}


@app.get("/api/accounts/{address}", tags=["Accounts"])
async def get_account(address: str):
    """Read the raw state of an account."""
    state = await _runtime_or_503().get_account(_parse_address(address))
    if state is None:
        raise HTTPException(status_code=404, detail=f"Account {address} not found")
    return {
        "address": str(state.address),
        "owner": str(state.owner),
        "lamports": state.lamports,
        "size": len(state.data),
    }


@app.post("/api/users/{owner}/initialize", tags=["Users"])
async def initialize_user(owner: str, request: InitializeRequest):
    """Create an identity's profile or post log account."""
    runtime = _runtime_or_503()
    owner_address = _parse_address(owner)
    try:
        result = await runtime.initialize_user(owner_address, request.role)
    except ArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _respond(result)


@app.post("/api/users/{owner}/follow", tags=["Users"])
async def follow_user(owner: str, request: FollowRequest):
    """Follow an identity."""
    result = await _runtime_or_503().follow(
        _parse_address(owner), _parse_address(request.target)
    )
    return _respond(result)


@app.post("/api/users/{owner}/unfollow", tags=["Users"])
async def unfollow_user(owner: str, request: FollowRequest):
    """Unfollow an identity."""
    result = await _runtime_or_503().unfollow(
        _parse_address(owner), _parse_address(request.target)
    )
    return _respond(result)


@app.get("/api/users/{owner}/follows", tags=["Users"])
async def query_followers(owner: str):
    """List the identities an owner follows."""
    return _respond(await _runtime_or_503().query_followers(_parse_address(owner)))


@app.post("/api/users/{owner}/posts", tags=["Posts"])
async def post_content(owner: str, request: PostRequest):
    """Append a post."""
    return _respond(await _runtime_or_503().post(_parse_address(owner), request.content))


@app.get("/api/users/{owner}/posts", tags=["Posts"])
async def query_posts(
    owner: str,
    index: Optional[int] = Query(None, ge=1, description="Read one post account"),
):
    """Read an identity's posts."""
    return _respond(await _runtime_or_503().query_posts(_parse_address(owner), index))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
