"""
Integration tests for appointment booking and lifecycle.

Covers double-booking prevention, rescheduling, status changes and the
role checks on each appointment route, using APITestCase with real
bearer tokens where the token path matters.
"""
from datetime import datetime, timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Appointment, Doctor, Patient, User
from ..services import tokens

SLOT = '2030-01-15T10:30:00'
OTHER_SLOT = '2030-01-15T11:30:00'


class AppointmentAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='admin1', email='a@example.com', password='pw', role=User.ROLE_ADMIN)
        self.doc_user = User.objects.create_user(username='doctor1', email='d@example.com', password='pw', role=User.ROLE_DOCTOR)
        self.pat_user = User.objects.create_user(username='patient1', email='p@example.com', password='pw', role=User.ROLE_PATIENT)
        self.patient = Patient.objects.create(name='John Doe', age=30, gender='Male', phone='9876543210', email='john@example.com')
        self.doctor = Doctor.objects.create(name='Dr. Smith', specialization='Cardiology', phone='5551234567', email='smith@example.com')

    def as_user(self, user) -> APIClient:
        self.client.force_authenticate(user=user)
        return self.client

    def book(self, when=SLOT, doctor=None, patient=None):
        return self.as_user(self.admin).post(reverse('appointments'), {
            'patientId': (patient or self.patient).id,
            'doctorId': (doctor or self.doctor).id,
            'appointmentDate': when,
        }, format='json')

    def test_book_embeds_patient_and_doctor(self):
        r = self.book()
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['status'], 'BOOKED')
        self.assertEqual(r.data['appointmentDate'], SLOT)
        self.assertEqual(r.data['patient']['id'], self.patient.id)
        self.assertEqual(r.data['doctor']['name'], 'Dr. Smith')

    def test_double_booking_same_slot_conflicts(self):
        self.assertEqual(self.book().status_code, status.HTTP_201_CREATED)
        r = self.book()
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('Doctor already has an appointment at this time', r.data['error']['message'])
        self.assertEqual(Appointment.objects.count(), 1)

    def test_same_slot_with_other_doctor_is_fine(self):
        other = Doctor.objects.create(name='Dr. Jones', specialization='Neurology', phone='5550000000', email='jones@example.com')
        self.assertEqual(self.book().status_code, status.HTTP_201_CREATED)
        self.assertEqual(self.book(doctor=other).status_code, status.HTTP_201_CREATED)

    def test_book_via_query_string(self):
        url = reverse('appointments') + f'?patientId={self.patient.id}&doctorId={self.doctor.id}&appointmentDate={SLOT}'
        r = self.as_user(self.admin).post(url)
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

    def test_book_missing_patient_or_doctor(self):
        r = self.as_user(self.admin).post(reverse('appointments'), {
            'patientId': 999, 'doctorId': self.doctor.id, 'appointmentDate': SLOT,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data['error']['message'], 'Patient not found with id: 999')
        r = self.as_user(self.admin).post(reverse('appointments'), {
            'patientId': self.patient.id, 'doctorId': 999, 'appointmentDate': SLOT,
        }, format='json')
        self.assertEqual(r.data['error']['message'], 'Doctor not found with id: 999')

    def test_ids_beyond_column_range_are_validation_errors(self):
        r = self.as_user(self.admin).post(reverse('appointments'), {
            'patientId': 10 ** 20, 'doctorId': self.doctor.id, 'appointmentDate': SLOT,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('patientId', r.data['error']['fields'])
        r = self.as_user(self.admin).get(reverse('appointments-search'), {'doctorId': 10 ** 20})
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('doctorId', r.data['error']['fields'])

    def test_inactive_doctor_cannot_be_booked(self):
        self.doctor.active = False
        self.doctor.save()
        r = self.book()
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(r.data['error']['message'], "Doctor 'Dr. Smith' is not currently available for appointments")

    def test_reschedule_onto_taken_slot_conflicts(self):
        first = self.book(SLOT).data['id']
        self.book(OTHER_SLOT)
        r = self.as_user(self.doc_user).put(
            reverse('appointment-reschedule', args=[first]), {'newDate': OTHER_SLOT}, format='json')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(r.data['error']['message'], 'Doctor already has an appointment at this time - Please choose a different time slot')

    def test_reschedule_onto_own_slot_and_new_slot(self):
        appt_id = self.book(SLOT).data['id']
        r = self.as_user(self.doc_user).put(reverse('appointment-reschedule', args=[appt_id]) + f'?newDate={SLOT}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        r = self.as_user(self.doc_user).put(
            reverse('appointment-reschedule', args=[appt_id]), {'newDate': OTHER_SLOT}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['appointmentDate'], OTHER_SLOT)
        self.assertEqual(r.data['status'], 'BOOKED')

    def test_status_update_is_idempotent_and_case_insensitive(self):
        appt_id = self.book().data['id']
        url = reverse('appointment-status', args=[appt_id])
        for _ in range(2):
            r = self.as_user(self.doc_user).put(url, {'status': 'completed'}, format='json')
            self.assertEqual(r.status_code, status.HTTP_200_OK)
            self.assertEqual(r.data['status'], 'COMPLETED')
        self.assertEqual(Appointment.objects.get(id=appt_id).status, 'COMPLETED')

    def test_invalid_status_is_rejected(self):
        appt_id = self.book().data['id']
        r = self.as_user(self.admin).put(reverse('appointment-status', args=[appt_id]), {'status': 'LOST'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['error']['message'], 'Invalid status: LOST. Valid values are: BOOKED, COMPLETED, CANCELLED')

    def test_status_update_on_missing_appointment(self):
        r = self.as_user(self.admin).put(reverse('appointment-status', args=[404]), {'status': 'BOOKED'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data['error']['message'], 'Appointment not found with id: 404')

    def test_patient_can_cancel(self):
        appt_id = self.book().data['id']
        r = self.as_user(self.pat_user).put(reverse('appointment-cancel', args=[appt_id]))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['status'], 'CANCELLED')

    def test_patient_cannot_update_status(self):
        appt_id = self.book().data['id']
        r = self.as_user(self.pat_user).put(reverse('appointment-status', args=[appt_id]), {'status': 'COMPLETED'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.data['error']['message'], 'Access Denied - Only ADMIN and DOCTOR can update appointment status')

    def test_doctor_cannot_book(self):
        r = self.as_user(self.doc_user).post(reverse('appointments'), {
            'patientId': self.patient.id, 'doctorId': self.doctor.id, 'appointmentDate': SLOT,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.data['error']['message'], 'Access Denied - Only ADMIN and PATIENT can book appointments')

    def test_delete_is_admin_only_and_hard(self):
        appt_id = self.book().data['id']
        url = reverse('appointment-detail', args=[appt_id])
        self.assertEqual(self.as_user(self.pat_user).delete(url).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.as_user(self.admin).delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.as_user(self.admin).get(url).status_code, status.HTTP_404_NOT_FOUND)

    def test_search_and_page(self):
        first = self.book(SLOT).data['id']
        self.book(OTHER_SLOT)
        Appointment.objects.filter(id=first).update(status='CANCELLED')
        r = self.as_user(self.pat_user).get(reverse('appointments-search'), {'status': 'cancelled'})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['totalElements'], 1)
        self.assertEqual(r.data['content'][0]['id'], first)

        r = self.as_user(self.pat_user).get(reverse('appointments-search'), {
            'doctorId': self.doctor.id, 'startDate': '2030-01-15T11:00:00',
        })
        self.assertEqual(r.data['totalElements'], 1)

        r = self.as_user(self.pat_user).get(reverse('appointments-page'))
        # Newest first by default
        self.assertEqual(r.data['content'][0]['appointmentDate'], OTHER_SLOT)
        self.assertTrue(r.data['first'] and r.data['last'])

    def test_today_and_upcoming(self):
        now = timezone.now()
        today = Appointment.objects.create(patient=self.patient, doctor=self.doctor, appointment_date=now)
        future = Appointment.objects.create(patient=self.patient, doctor=self.doctor, appointment_date=now + timedelta(days=3))
        Appointment.objects.create(
            patient=self.patient, doctor=self.doctor, appointment_date=now + timedelta(days=4), status='CANCELLED')
        client = self.as_user(self.doc_user)

        r = client.get(reverse('appointments-today'))
        self.assertEqual([a['id'] for a in r.data], [today.id])
        r = client.get(reverse('appointments-today-doctor', args=[self.doctor.id + 1]))
        self.assertEqual(r.data, [])

        r = client.get(reverse('appointments-upcoming'))
        self.assertEqual([a['id'] for a in r.data['content']], [future.id])
        r = client.get(reverse('appointments-upcoming-patient', args=[self.patient.id]))
        self.assertEqual([a['id'] for a in r.data], [future.id])
        r = client.get(reverse('appointments-upcoming-doctor', args=[self.doctor.id]))
        self.assertEqual(len(r.data), 1)

    def test_stats(self):
        self.book(SLOT)
        appt_id = self.book(OTHER_SLOT).data['id']
        self.as_user(self.admin).put(reverse('appointment-cancel', args=[appt_id]))
        r = self.as_user(self.admin).get(reverse('appointments-stats'), {'doctorId': self.doctor.id})
        self.assertEqual(r.data['totalAppointments'], 2)
        self.assertEqual(r.data['bookedAppointments'], 1)
        self.assertEqual(r.data['cancelledAppointments'], 1)
        self.assertEqual(r.data['completedAppointments'], 0)
        self.assertEqual(r.data['doctorAppointments'], 2)

    def test_racing_insert_surfaces_as_conflict(self):
        from unittest import mock
        from ..models import AppointmentQuerySet

        self.assertEqual(self.book().status_code, status.HTTP_201_CREATED)
        # Slot check sees nothing, as when a concurrent booking commits after it
        with mock.patch.object(AppointmentQuerySet, 'at_slot', lambda qs, doctor_id, when: qs.none()):
            r = self.book()
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(r.data['error']['code'], 'conflict')
        self.assertEqual(
            r.data['error']['message'],
            'Doctor already has an appointment at this time - Please choose a different time slot',
        )
        self.assertEqual(Appointment.objects.count(), 1)


class PatientJourneyTests(APITestCase):
    """Register, book, duplicate, complete, and attempt delete."""

    def setUp(self) -> None:
        self.patient = Patient.objects.create(name='Jane Roe', age=28, gender='Female', phone='1112223333', email='jane.roe@example.com')
        self.doctor = Doctor.objects.create(name='Dr. Who', specialization='General', phone='4445556666', email='who@example.com')
        self.doc_user = User.objects.create_user(username='drwho', email='drwho@example.com', password='pw', role=User.ROLE_DOCTOR)

    def test_jane_books_and_doctor_completes(self):
        r = self.client.post(reverse('auth-register'), {
            'username': 'jane', 'email': 'jane@example.com', 'password': 'p123',
            'fullName': 'Jane Roe', 'role': 'PATIENT',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        jane = APIClient()
        jane.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['accessToken']}")

        body = {'patientId': self.patient.id, 'doctorId': self.doctor.id, 'appointmentDate': SLOT}
        booked = jane.post(reverse('appointments'), body, format='json')
        self.assertEqual(booked.status_code, status.HTTP_201_CREATED)
        self.assertEqual(booked.data['status'], 'BOOKED')
        self.assertEqual(jane.post(reverse('appointments'), body, format='json').status_code, status.HTTP_409_CONFLICT)

        doc = APIClient()
        doc.credentials(HTTP_AUTHORIZATION=f'Bearer {tokens.issue_access(self.doc_user)}')
        done = doc.put(reverse('appointment-status', args=[booked.data['id']]), {'status': 'COMPLETED'}, format='json')
        self.assertEqual(done.status_code, status.HTTP_200_OK)
        self.assertEqual(done.data['status'], 'COMPLETED')

        r = jane.delete(reverse('appointment-detail', args=[booked.data['id']]))
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Appointment.objects.filter(id=booked.data['id']).exists())


class UniqueSlotConstraintTests(APITestCase):
    def test_database_rejects_duplicate_slot(self):
        from django.db import IntegrityError, transaction
        patient = Patient.objects.create(name='A', age=1, gender='Male', phone='0000000001', email='a1@example.com')
        doctor = Doctor.objects.create(name='B', specialization='C', phone='1', email='b@example.com')
        when = timezone.make_aware(datetime(2030, 1, 1, 9, 0))
        Appointment.objects.create(patient=patient, doctor=doctor, appointment_date=when)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Appointment.objects.create(patient=patient, doctor=doctor, appointment_date=when)
