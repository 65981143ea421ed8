import datetime
from uuid import UUID
from typing import Annotated, Dict, List
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from device_api.api.errors import error_response
from device_api.api.links import build_link, build_page_link
from device_api.config import get_settings
from device_api.db.repository import DeviceRepository
from device_api.db.session import sessionmanager
from device_api.dto.device import DeviceDTO, DeviceRequest
from device_api.exceptions import DeviceError
from device_api.services.device import DeviceService
from device_api.services.pagination import Page, PageRequest

PREFIX = "/api/v1"
DEVICES_ROUTE = "/devices"
DEVICE_ROUTE = "/devices/{id}"
BRAND_ROUTE = "/devices/brand/{brand}"

router = APIRouter()


class Link(BaseModel):
    href: str


class DeviceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    name: str
    brand: str
    created_at: datetime.datetime = Field(alias="createdAt")
    links: Dict[str, Link] = Field(default_factory=dict, alias="_links")


class DeviceList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    devices: List[DeviceResponse] = Field(alias="deviceResponseList")


class PageMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    size: int
    total_elements: int = Field(alias="totalElements")
    total_pages: int = Field(alias="totalPages")
    number: int


class PagedDeviceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left out of the body when the page is empty.
    embedded: DeviceList | None = Field(None, alias="_embedded")
    links: Dict[str, Link] = Field(alias="_links")
    page: PageMetadata


def get_device_service() -> DeviceService:
    return DeviceService(DeviceRepository(sessionmanager))


def get_page_request(
    page: Annotated[int, Query(ge=0)] = 0,
    size: Annotated[int | None, Query(ge=1)] = None,
) -> PageRequest:
    settings = get_settings()
    if size is None:
        size = settings.default_page_size
    try:
        return PageRequest(page=page, size=min(size, settings.max_page_size))
    except ValueError as e:
        raise RequestValidationError(
            [
                {
                    "type": "value_error",
                    "loc": ("query", "page"),
                    "msg": str(e),
                    "input": page,
                }
            ]
        )


ServiceDep = Annotated[DeviceService, Depends(get_device_service)]
PageDep = Annotated[PageRequest, Depends(get_page_request)]


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/") + PREFIX


def _self_link(request: Request, device_id: UUID) -> str:
    return build_link(_base_url(request), DEVICE_ROUTE, id=device_id)


def _device_response(request: Request, device: DeviceDTO) -> DeviceResponse:
    return DeviceResponse(
        id=device.id,
        name=device.name,
        brand=device.brand,
        created_at=device.created_at,
        links={"self": Link(href=_self_link(request, device.id))},
    )


def _paged_response(
    request: Request, page: Page[DeviceDTO], template: str, **params: str
) -> PagedDeviceResponse:
    base = _base_url(request)

    def link(number: int) -> Link:
        return Link(
            href=build_page_link(base, template, number, page.size, **params)
        )

    links = {"first": link(0)}
    if page.has_previous:
        links["prev"] = link(page.number - 1)
    links["self"] = link(page.number)
    if page.has_next:
        links["next"] = link(page.number + 1)
    links["last"] = link(max(page.total_pages - 1, 0))

    embedded = None
    if page.items:
        embedded = DeviceList(
            devices=[_device_response(request, d) for d in page.items]
        )

    return PagedDeviceResponse(
        embedded=embedded,
        links=links,
        page=PageMetadata(
            size=page.size,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            number=page.number,
        ),
    )


@router.post(
    "/devices",
    response_model=DeviceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_device(
    body: DeviceRequest,
    request: Request,
    response: Response,
    service: ServiceDep,
) -> DeviceResponse | JSONResponse:
    try:
        device = await service.add_device(body)
    except DeviceError as e:
        return error_response(e.kind)

    result = _device_response(request, device)
    response.headers["Location"] = result.links["self"].href
    return result


@router.get(
    "/devices",
    response_model=PagedDeviceResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def devices_list(
    request: Request, page_request: PageDep, service: ServiceDep
) -> PagedDeviceResponse:
    page = await service.list_all_devices(page_request)
    return _paged_response(request, page, DEVICES_ROUTE)


@router.get(
    "/devices/brand/{brand}",
    response_model=PagedDeviceResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def devices_by_brand(
    brand: str, request: Request, page_request: PageDep, service: ServiceDep
) -> PagedDeviceResponse:
    page = await service.search_device_by_brand(brand, page_request)
    return _paged_response(request, page, BRAND_ROUTE, brand=brand)


# An empty brand leaves no path segment for `{brand}`; without this route the
# request would fall through to `/devices/{id}`.
@router.get(
    "/devices/brand/",
    response_model=PagedDeviceResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def devices_by_empty_brand(
    request: Request, page_request: PageDep, service: ServiceDep
) -> PagedDeviceResponse:
    return await devices_by_brand("", request, page_request, service)


@router.get(
    "/devices/{id}",
    response_model=DeviceResponse,
    status_code=status.HTTP_200_OK,
)
async def device_by_id(
    id: UUID, request: Request, service: ServiceDep
) -> DeviceResponse | JSONResponse:
    try:
        device = await service.get_device_by_identifier(id)
    except DeviceError as e:
        return error_response(e.kind)

    return _device_response(request, device)


@router.put(
    "/devices/{id}",
    response_model=DeviceResponse,
    status_code=status.HTTP_200_OK,
)
async def update_device(
    id: UUID, body: DeviceRequest, request: Request, service: ServiceDep
) -> DeviceResponse | JSONResponse:
    try:
        device = await service.update_device(id, body)
    except DeviceError as e:
        return error_response(e.kind)

    return _device_response(request, device)


@router.delete(
    "/devices/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_device(id: UUID, service: ServiceDep) -> Response:
    try:
        await service.delete_device(id)
    except DeviceError as e:
        return error_response(e.kind)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
