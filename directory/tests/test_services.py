from unittest import mock

import pytest
from django.core.management import call_command
from django.db import IntegrityError
from django.db.models import QuerySet

from directory.exceptions import ConflictError, RecordNotFound, UnknownReferenceError
from directory.models import City, Doctor, DoctorCity, DoctorSpecialty, Specialty
from directory.services import doctors as svc
from directory.services.links import reconcile_links
from directory.services.reference import SEED_CITIES, SEED_SPECIALTIES, seed_reference_data, upsert_by_natural_key
from directory.services.search import page_offset, total_pages

pytestmark = pytest.mark.django_db


@pytest.fixture
def ref():
    return {
        'A': Specialty.objects.create(name='Cardiologia'),
        'B': Specialty.objects.create(name='Pediatria'),
        'C': Specialty.objects.create(name='Dermatologia'),
        'sp': City.objects.create(name='São Paulo', state='SP'),
        'apu': City.objects.create(name='Apucarana', state='PR'),
    }


def _specialty_ids(doctor):
    return set(DoctorSpecialty.objects.filter(doctor=doctor).values_list('specialty_id', flat=True))


def test_seed_is_idempotent():
    first = seed_reference_data()
    second = seed_reference_data()
    assert first == {'specialties': len(SEED_SPECIALTIES), 'cities': len(SEED_CITIES)}
    assert second == {'specialties': 0, 'cities': 0}
    assert Specialty.objects.count() == len(SEED_SPECIALTIES)
    assert City.objects.count() == len(SEED_CITIES)


def test_seed_command_runs_twice(capsys):
    call_command('seed_directory')
    call_command('seed_directory')
    out = capsys.readouterr().out
    assert 'Database seeded successfully!' in out
    assert City.objects.filter(name='São Paulo', state='SP').count() == 1


def test_upsert_keeps_existing_row():
    city, created = upsert_by_natural_key(City, {'name': 'Apucarana', 'state': 'PR'})
    again, created_again = upsert_by_natural_key(City, {'name': 'Apucarana', 'state': 'PR'})
    assert created and not created_again
    assert again.pk == city.pk
    # same name in another state is a different city
    _, other = upsert_by_natural_key(City, {'name': 'Apucarana', 'state': 'SP'})
    assert other


def test_duplicate_registration_number_is_rejected(ref):
    svc.create_doctor(name='Ana Souza', registration_number='CRM-1', specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    with pytest.raises(ConflictError):
        svc.create_doctor(name='Outra Ana', registration_number='CRM-1', specialty_ids=[ref['B'].id], city_ids=[ref['sp'].id])
    assert Doctor.objects.filter(registration_number='CRM-1').count() == 1


def test_create_with_duplicate_ids_links_once(ref):
    doctor = svc.create_doctor(name='Ana Souza', registration_number='CRM-1',
                               specialty_ids=[ref['A'].id, ref['A'].id], city_ids=[ref['sp'].id])
    assert [s.id for s in doctor.specialties.all()] == [ref['A'].id]


def test_create_unknown_reference_writes_nothing(ref):
    with pytest.raises(UnknownReferenceError) as exc:
        svc.create_doctor(name='Ana Souza', registration_number='CRM-1', specialty_ids=[ref['A'].id, 404], city_ids=[ref['sp'].id])
    assert exc.value.field == 'specialties'
    assert exc.value.ids == [404]
    assert not Doctor.objects.exists()


def test_pagination_math(ref):
    for i in range(7):
        svc.create_doctor(name=f'Doctor {i}', registration_number=f'CRM-{i:03d}', specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    limit = 3
    assert total_pages(7, limit) == 3
    assert total_pages(0, limit) == 0
    page, total = svc.list_doctors(offset=page_offset(3, limit), limit=limit)
    assert total == 7
    assert [d.name for d in page] == ['Doctor 6']
    page, _ = svc.list_doctors(offset=page_offset(2, limit), limit=limit)
    assert [d.name for d in page] == ['Doctor 3', 'Doctor 4', 'Doctor 5']


def test_relink_replaces_exact_set(ref):
    doctor = svc.create_doctor(name='Ana Souza', registration_number='CRM-1',
                               specialty_ids=[ref['A'].id, ref['B'].id], city_ids=[ref['sp'].id])
    updated = svc.replace_doctor(doctor.id, name='Ana Souza', registration_number='CRM-1',
                                 specialty_ids=[ref['B'].id, ref['C'].id], city_ids=[ref['apu'].id])
    assert _specialty_ids(updated) == {ref['B'].id, ref['C'].id}
    assert DoctorSpecialty.objects.filter(doctor=doctor, specialty=ref['B']).count() == 1
    assert [c.id for c in updated.cities.all()] == [ref['apu'].id]


def test_relink_with_unknown_id_is_atomic(ref):
    doctor = svc.create_doctor(name='Ana Souza', registration_number='CRM-1',
                               specialty_ids=[ref['A'].id, ref['B'].id], city_ids=[ref['sp'].id])
    with pytest.raises(UnknownReferenceError):
        svc.replace_doctor(doctor.id, name='Renamed', registration_number='CRM-9',
                           specialty_ids=[ref['B'].id, 999], city_ids=[ref['sp'].id])
    doctor.refresh_from_db()
    assert doctor.name == 'Ana Souza'
    assert doctor.registration_number == 'CRM-1'
    assert _specialty_ids(doctor) == {ref['A'].id, ref['B'].id}


def test_replace_missing_doctor(ref):
    with pytest.raises(RecordNotFound):
        svc.replace_doctor(12345, name='Nobody', registration_number='CRM-0',
                           specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])


def test_replace_may_keep_own_registration_number(ref):
    doctor = svc.create_doctor(name='Ana Souza', registration_number='CRM-1', specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    updated = svc.replace_doctor(doctor.id, name='Ana S. Reis', registration_number='CRM-1',
                                 specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    assert updated.name == 'Ana S. Reis'


def test_reconcile_reports_diff(ref):
    doctor = Doctor.objects.create(name='Ana Souza', registration_number='CRM-1')
    DoctorSpecialty.objects.create(doctor=doctor, specialty=ref['A'])
    DoctorSpecialty.objects.create(doctor=doctor, specialty=ref['B'])
    added, removed = reconcile_links(DoctorSpecialty, 'doctor', 'specialty', doctor, [ref['B'].id, ref['C'].id])
    assert added == {ref['C'].id}
    assert removed == {ref['A'].id}
    added, removed = reconcile_links(DoctorSpecialty, 'doctor', 'specialty', doctor, [ref['B'].id, ref['C'].id])
    assert added == set() and removed == set()


def test_search_conjunction(ref):
    p1 = svc.create_doctor(name='Ana', registration_number='CRM-1', specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    p2 = svc.create_doctor(name='Ana', registration_number='CRM-2', specialty_ids=[ref['B'].id], city_ids=[ref['sp'].id])
    p3 = svc.create_doctor(name='Bruno', registration_number='CRM-3',
                           specialty_ids=[ref['A'].id, ref['C'].id], city_ids=[ref['sp'].id, ref['apu'].id])

    assert [d.id for d in svc.search_doctors(name='Ana', specialty='Cardio')] == [p1.id]
    assert [d.id for d in svc.search_doctors(city='São Paulo')] == [p1.id, p2.id, p3.id]
    assert [d.id for d in svc.search_doctors()] == [p1.id, p2.id, p3.id]
    # several matching links still yield the doctor once
    assert [d.id for d in svc.search_doctors(specialty='logia')] == [p1.id, p3.id]
    assert [d.id for d in svc.search_doctors(name='ana', city='apucarana')] == []
    assert [d.id for d in svc.search_doctors(name='', specialty='  ')] == [p1.id, p2.id, p3.id]


def test_delete_keeps_reference_rows(ref):
    doctor = svc.create_doctor(name='Ana Souza', registration_number='CRM-1', specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    svc.delete_doctor(doctor.id)
    assert not DoctorSpecialty.objects.filter(doctor_id=doctor.id).exists()
    assert not DoctorCity.objects.filter(doctor_id=doctor.id).exists()
    assert Specialty.objects.get(pk=ref['A'].id).name == 'Cardiologia'
    assert City.objects.get(pk=ref['sp'].id).state == 'SP'
    with pytest.raises(RecordNotFound):
        svc.delete_doctor(doctor.id)


def test_upsert_rereads_row_after_lost_race():
    winner = City.objects.create(name='Apucarana', state='PR')
    # the competing insert committed between our lookup and our insert
    with mock.patch.object(QuerySet, 'get_or_create', side_effect=IntegrityError('unique_city_name_state')):
        city, created = upsert_by_natural_key(City, {'name': 'Apucarana', 'state': 'PR'})
    assert created is False
    assert city.pk == winner.pk


def test_lost_registration_race_is_conflict(ref):
    svc.create_doctor(name='Ana Souza', registration_number='CRM-1', specialty_ids=[ref['A'].id], city_ids=[ref['sp'].id])
    # pre-check passes, so the unique constraint is what rejects the row
    with mock.patch('directory.services.doctors._ensure_registration_free'):
        with pytest.raises(ConflictError):
            svc.create_doctor(name='Outra Ana', registration_number='CRM-1',
                              specialty_ids=[ref['B'].id], city_ids=[ref['sp'].id])
    assert Doctor.objects.filter(registration_number='CRM-1').count() == 1
    assert Doctor.objects.count() == 1


def test_search_folds_accented_letters():
    clinica = Specialty.objects.create(name='Clínica Geral')
    sp = City.objects.create(name='São Paulo', state='SP')
    erica = svc.create_doctor(name='Érica Ávila', registration_number='CRM-77',
                              specialty_ids=[clinica.id], city_ids=[sp.id])
    for terms in ({'name': 'érica'}, {'name': 'ÉRICA ÁVILA'}, {'specialty': 'CLÍNICA'},
                  {'city': 'SÃO PAULO'}, {'city': 'são paulo'}):
        assert [d.id for d in svc.search_doctors(**terms)] == [erica.id], terms
    # accents are not folded
    assert svc.search_doctors(name='Erica') == []
