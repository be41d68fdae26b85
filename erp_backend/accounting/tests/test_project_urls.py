# accounting/tests/test_project_urls.py

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient


class ProjectRoutesTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_api_root_lists_modules(self):
        response = self.client.get(reverse("api-root"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(set(response.data["modules"]), {"accounting", "assets", "payroll", "quotes"})

    def test_health_check_reports_db(self):
        response = self.client.get(reverse("health-check"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"status": "ok", "db": "ok"})
