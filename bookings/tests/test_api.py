import datetime

from django.test import TestCase

from bookings.models import Booking
from bookings.services import BookingService
from catalog.models import Classroom, Equipment
from users.models import User

DAY = datetime.date(2099, 1, 5)


class BookingApiTests(TestCase):
    def setUp(self):
        self.teacher = User.objects.create_user(username='teach', password='pass', name='Ms. Teacher', role='teacher')
        self.other = User.objects.create_user(username='other', password='pass', role='teacher')
        self.admin = User.objects.create_user(username='boss', password='pass', name='Head Admin', role='admin')
        self.room = Classroom.objects.create(program='English Programme', name_th='EP ป.2', name_en='EP G2')
        self.projector = Equipment.objects.create(name_th='โปรเจคเตอร์', name_en='Projector')

    def create(self, **overrides):
        data = {
            'program': 'English Programme',
            'classroom': self.room.pk,
            'period': 5,
            'date': DAY.isoformat(),
            'equipment': [self.projector.pk],
            'learningPlan': 'Reading',
        }
        data.update(overrides)
        return self.client.post('/api/bookings/', data, content_type='application/json')

    def test_login_required(self):
        resp = self.client.get('/api/bookings/')
        self.assertIn(resp.status_code, (401, 403))

    def test_create_and_conflict(self):
        self.client.force_login(self.teacher)
        resp = self.create()
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['teacherName'], 'Ms. Teacher')
        self.assertEqual(resp.json()['status'], 'Booked')

        self.client.force_login(self.other)
        resp = self.create()
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(Booking.objects.count(), 1)

    def test_list_by_date_and_status(self):
        self.client.force_login(self.teacher)
        self.create()
        self.create(date='2099-01-06')
        BookingService.cancel_booking(Booking.objects.get(date='2099-01-06'), self.teacher)

        resp = self.client.get('/api/bookings/', {'date': '2099-01-05'})
        self.assertEqual(len(resp.json()), 1)

        resp = self.client.get('/api/bookings/', {'status': 'Not Used'})
        self.assertEqual([b['date'] for b in resp.json()], ['2099-01-06'])

        resp = self.client.get('/api/bookings/', {'date': 'tomorrow'})
        self.assertEqual(resp.status_code, 400)

    def test_cancel(self):
        self.client.force_login(self.teacher)
        booking_id = self.create().json()['id']
        resp = self.client.post(f'/api/bookings/{booking_id}/cancel/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'Not Used')

        resp = self.client.post(f'/api/bookings/{booking_id}/cancel/')
        self.assertEqual(resp.status_code, 400)

    def test_confirm_return_is_admin_only(self):
        self.client.force_login(self.teacher)
        booking_id = self.create().json()['id']
        resp = self.client.post(f'/api/bookings/{booking_id}/confirm-return/')
        self.assertEqual(resp.status_code, 403)

        self.client.force_login(self.admin)
        resp = self.client.post(
            f'/api/bookings/{booking_id}/confirm-return/', {'notes': 'ok'}, content_type='application/json'
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'Returned')
        self.assertEqual(resp.json()['returnedBy'], 'Head Admin')

    def test_other_teacher_cannot_delete(self):
        self.client.force_login(self.teacher)
        booking_id = self.create().json()['id']
        self.client.force_login(self.other)
        resp = self.client.delete(f'/api/bookings/{booking_id}/')
        self.assertEqual(resp.status_code, 403)
        self.assertTrue(Booking.objects.filter(pk=booking_id).exists())

    def test_ics_download(self):
        self.client.force_login(self.teacher)
        booking_id = self.create().json()['id']
        resp = self.client.get(f'/api/bookings/{booking_id}/ics/', {'lang': 'en'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp['Content-Type'], 'text/calendar')
        body = resp.content.decode('utf-8')
        self.assertIn('BEGIN:VEVENT', body)
        self.assertIn('EP G2', body)


class ReportApiTests(TestCase):
    def setUp(self):
        self.teacher = User.objects.create_user(username='teach', password='pass', name='Ms. Teacher', role='teacher')
        self.admin = User.objects.create_user(username='boss', password='pass', role='admin')
        room = Classroom.objects.create(program='Thai Programme', name_th='ป.3/1', name_en='P.3/1')
        projector = Equipment.objects.create(name_th='โปรเจคเตอร์', name_en='Projector')
        for period in (1, 2):
            BookingService.create_booking(
                self.teacher, equipment=[projector], program='Thai Programme',
                classroom=room, period=period, date=DAY,
            )

    def test_teacher_cannot_see_reports(self):
        self.client.force_login(self.teacher)
        for url in ('/api/bookings/report/', '/api/bookings/summary/', '/api/bookings/export/'):
            self.assertEqual(self.client.get(url).status_code, 403, url)

    def test_report_with_empty_filters(self):
        self.client.force_login(self.admin)
        resp = self.client.get('/api/bookings/report/', {'startDate': '', 'program': 'Thai Programme'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()), 2)

    def test_report_rejects_inverted_range(self):
        self.client.force_login(self.admin)
        resp = self.client.get('/api/bookings/report/', {'startDate': '2099-02-01', 'endDate': '2099-01-01'})
        self.assertEqual(resp.status_code, 400)

    def test_summary(self):
        self.client.force_login(self.admin)
        resp = self.client.get('/api/bookings/summary/', {'lang': 'en'})
        self.assertEqual(resp.json()['total'], 2)
        self.assertEqual(resp.json()['by_classroom'], [{'name': 'P.3/1', 'count': 2}])

    def test_export_csv(self):
        self.client.force_login(self.admin)
        resp = self.client.get('/api/bookings/export/')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp['Content-Type'].startswith('text/csv'))
        self.assertIn('report.csv', resp['Content-Disposition'])
        text = resp.content.decode('utf-8')
        self.assertTrue(text.startswith('\ufeff'))
        self.assertEqual(len(text.splitlines()), 3)
        self.assertIn('ป.3/1', text)
