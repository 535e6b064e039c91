"""
Patient record endpoints.

Any authenticated user may read patient records.  Admins, doctors and
nurses may create and update them; deleting is reserved for admins
(see :class:`records.permissions.PatientRecordAccess`).
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from records.permissions import PatientRecordAccess
from records.responses import api_response
from records.serializers.patient import PatientSerializer
from records.services import patients as patient_service
from records.services.audit import log_action


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, PatientRecordAccess])
def patients(request):
    if request.method == 'POST':
        s = PatientSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = patient_service.create_patient(**s.validated_data)
        log_action(user=request.user, action='patient_create', object_type='patient', object_id=patient.id)
        return api_response(status.HTTP_201_CREATED, True, 'Patient created', PatientSerializer(patient).data)

    data = PatientSerializer(patient_service.list_patients(), many=True).data
    return api_response(status.HTTP_200_OK, True, '', data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, PatientRecordAccess])
def patient_detail(request, pk: int):
    patient = patient_service.get_patient(pk)

    if request.method == 'GET':
        return api_response(status.HTTP_200_OK, True, '', PatientSerializer(patient).data)

    if request.method == 'DELETE':
        patient_service.delete_patient(pk)
        log_action(user=request.user, action='patient_delete', object_type='patient', object_id=pk)
        return api_response(status.HTTP_200_OK, True, 'Patient deleted')

    s = PatientSerializer(patient, data=request.data, partial=request.method == 'PATCH')
    s.is_valid(raise_exception=True)
    patient = patient_service.update_patient(pk, **s.validated_data)
    log_action(user=request.user, action='patient_update', object_type='patient', object_id=pk,
               detail={'fields': sorted(s.validated_data)})
    return api_response(status.HTTP_200_OK, True, 'Patient updated', PatientSerializer(patient).data)
