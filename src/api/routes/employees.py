"""
Employee records API routes
All data access goes through EmployeesService; routes only map results to HTTP.
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, Depends, Response

from models.employee import EmployeeCreateRequest, EmployeeUpdateRequest, EmployeeResponse
from services.base_service import ServiceResult, VALIDATION_ERROR, RESOURCE_NOT_FOUND, CONFLICT
from services.employees_service import EmployeesService, get_employees_service
from utils.error_handling import set_endpoint_context

router = APIRouter()
logger = logging.getLogger(__name__)

_STATUS_BY_ERROR_TYPE = {
    VALIDATION_ERROR: 400,
    RESOURCE_NOT_FOUND: 404,
    CONFLICT: 409,
}


def _raise_for_result(result: ServiceResult, failure_message: str):
    if result.success:
        return
    status_code = _STATUS_BY_ERROR_TYPE.get(result.error_type, 500)
    if status_code == 500:
        raise HTTPException(status_code=500, detail=failure_message)
    raise HTTPException(status_code=status_code, detail=result.error)


@router.get("", response_model=List[EmployeeResponse])
async def list_employees(service: EmployeesService = Depends(get_employees_service)):
    """List all employees"""
    set_endpoint_context("employees.list")
    result = await service.list_employees()
    _raise_for_result(result, "Error al obtener los empleados")
    return result.data


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: int,
    service: EmployeesService = Depends(get_employees_service)
):
    """Get employee details"""
    set_endpoint_context("employees.get")
    result = await service.get_employee(employee_id)
    _raise_for_result(result, "Error al obtener el empleado")
    return result.data[0]


@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    request: EmployeeCreateRequest,
    service: EmployeesService = Depends(get_employees_service)
):
    """Create a new employee"""
    set_endpoint_context("employees.create")
    result = await service.create_employee(request.model_dump(mode="json"))
    _raise_for_result(result, "Error al crear el empleado")
    return result.data[0]


@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: int,
    request: EmployeeUpdateRequest,
    service: EmployeesService = Depends(get_employees_service)
):
    """Update the fields present in the body"""
    set_endpoint_context("employees.update")
    result = await service.update_employee(
        employee_id, request.model_dump(mode="json", exclude_unset=True)
    )
    _raise_for_result(result, "Error al actualizar el empleado")
    return result.data[0]


@router.delete("/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: int,
    service: EmployeesService = Depends(get_employees_service)
):
    """Delete an employee"""
    set_endpoint_context("employees.delete")
    result = await service.delete_employee(employee_id)
    _raise_for_result(result, "Error al eliminar el empleado")
    return Response(status_code=204)
