import logging

from rest_framework.exceptions import NotFound

from records.models import Patient

logger = logging.getLogger(__name__)

PATIENT_FIELDS = ('first_name', 'last_name', 'dob', 'gender')


def list_patients():
    return Patient.objects.all()


def get_patient(pk) -> Patient:
    patient = Patient.objects.filter(pk=pk).first()
    if patient is None:
        raise NotFound('Patient not found')
    return patient


def create_patient(*, first_name, last_name, dob, gender) -> Patient:
    patient = Patient.objects.create(first_name=first_name, last_name=last_name, dob=dob, gender=gender)
    logger.info("created patient %s", patient.pk)
    return patient


def update_patient(pk, **fields) -> Patient:
    """Apply ``fields`` to the patient and bump ``updated_at``.

    Unknown keys are ignored so callers can pass validated serializer
    data straight through.
    """
    patient = get_patient(pk)
    changed = [name for name in PATIENT_FIELDS if name in fields]
    for name in changed:
        setattr(patient, name, fields[name])
    patient.save(update_fields=changed + ['updated_at'])
    logger.info("updated patient %s fields=%s", patient.pk, changed)
    return patient


def delete_patient(pk) -> None:
    patient = get_patient(pk)
    patient.delete()
    logger.info("deleted patient %s", pk)
