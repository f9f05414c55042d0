from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.urls import reverse

from users.models import User


class RoleAccessTests(TestCase):
    def setUp(self):
        self.teacher = User.objects.create_user(username='teach', password='pass', name='Ms.  Teacher ', role='teacher')
        self.admin = User.objects.create_user(username='boss', password='pass', name='Head Admin', role='admin')

    def test_name_whitespace_is_normalized(self):
        self.assertEqual(self.teacher.name, 'Ms. Teacher')

    def test_role_helpers(self):
        self.assertTrue(self.teacher.is_teacher)
        self.assertFalse(self.teacher.is_school_admin)
        self.assertTrue(self.admin.is_school_admin)
        self.assertTrue(self.admin.can_confirm_returns)

    def test_superuser_counts_as_admin(self):
        root = User.objects.create_superuser(username='root', password='pass')
        self.assertTrue(root.is_school_admin)

    def test_login_returns_user_without_password(self):
        resp = self.client.post(reverse('login'), {'username': 'teach', 'password': 'pass'}, content_type='application/json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['username'], 'teach')
        self.assertNotIn('password', resp.json())

        resp = self.client.get(reverse('me'))
        self.assertEqual(resp.json()['role'], 'teacher')

    def test_login_rejects_wrong_password(self):
        resp = self.client.post(reverse('login'), {'username': 'teach', 'password': 'nope'}, content_type='application/json')
        self.assertEqual(resp.status_code, 401)

    def test_teacher_cannot_list_users(self):
        self.client.force_login(self.teacher)
        resp = self.client.get('/api/users/')
        self.assertEqual(resp.status_code, 403)

    def test_admin_can_list_users(self):
        self.client.force_login(self.admin)
        resp = self.client.get('/api/users/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual({u['username'] for u in resp.json()}, {'teach', 'boss'})


class UserManagementTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username='boss', password='pass', role='admin')
        self.client.force_login(self.admin)

    def test_create_user_hashes_password(self):
        resp = self.client.post(
            '/api/users/',
            {'name': 'New Teacher', 'username': 'A0900000000', 'password': 'secret', 'role': 'teacher'},
            content_type='application/json',
        )
        self.assertEqual(resp.status_code, 201)
        user = User.objects.get(username='A0900000000')
        self.assertNotEqual(user.password, 'secret')
        self.assertTrue(user.check_password('secret'))

    def test_create_user_requires_password(self):
        resp = self.client.post(
            '/api/users/', {'name': 'No Pass', 'username': 'nopass', 'role': 'teacher'}, content_type='application/json'
        )
        self.assertEqual(resp.status_code, 400)

    def test_blank_password_on_update_keeps_old_one(self):
        user = User.objects.create_user(username='t1', password='original', role='teacher')
        resp = self.client.patch(
            f'/api/users/{user.pk}/', {'name': 'Renamed', 'password': ''}, content_type='application/json'
        )
        self.assertEqual(resp.status_code, 200)
        user.refresh_from_db()
        self.assertEqual(user.name, 'Renamed')
        self.assertTrue(user.check_password('original'))

    def test_password_change_on_update(self):
        user = User.objects.create_user(username='t2', password='original', role='teacher')
        self.client.patch(f'/api/users/{user.pk}/', {'password': 'changed'}, content_type='application/json')
        user.refresh_from_db()
        self.assertTrue(user.check_password('changed'))


class EnsureDefaultAdminTests(TestCase):
    @override_settings(DEFAULT_ADMIN_USERNAME='admin', DEFAULT_ADMIN_PASSWORD='admin1234', DEFAULT_ADMIN_NAME='School Admin')
    def test_creates_admin_once(self):
        call_command('ensure_default_admin', stdout=StringIO())
        call_command('ensure_default_admin', stdout=StringIO())
        admins = User.objects.filter(username='admin')
        self.assertEqual(admins.count(), 1)
        self.assertEqual(admins[0].role, 'admin')
        self.assertTrue(admins[0].check_password('admin1234'))

    @override_settings(DEFAULT_ADMIN_PASSWORD='')
    def test_requires_password(self):
        with self.assertRaises(CommandError):
            call_command('ensure_default_admin', username='fresh', stdout=StringIO())
