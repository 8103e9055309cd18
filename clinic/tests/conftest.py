import pytest
from rest_framework.test import APIClient

from clinic.models import Doctor, Patient, User
from clinic.services import tokens


@pytest.fixture
def make_user(db):
    def _make(username, role, password='P@ssw0rd1', **extra):
        return User.objects.create_user(
            username=username,
            email=extra.pop('email', f'{username}@example.com'),
            password=password,
            role=role,
            **extra,
        )
    return _make


@pytest.fixture
def bearer():
    """APIClient carrying a real access token for ``user``."""
    def _client(user=None):
        client = APIClient()
        if user is not None:
            client.credentials(HTTP_AUTHORIZATION=f'Bearer {tokens.issue_access(user)}')
        return client
    return _client


@pytest.fixture
def admin(make_user):
    return make_user('admin1', User.ROLE_ADMIN)


@pytest.fixture
def doctor_user(make_user):
    return make_user('doctor1', User.ROLE_DOCTOR)


@pytest.fixture
def patient_user(make_user):
    return make_user('patient1', User.ROLE_PATIENT)


@pytest.fixture
def patient(db):
    return Patient.objects.create(name='John Doe', age=30, gender='Male', phone='9876543210', email='john@example.com')


@pytest.fixture
def doctor(db):
    return Doctor.objects.create(name='Dr. Smith', specialization='Cardiology', phone='5551234567', email='smith@example.com')
