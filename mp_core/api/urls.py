# mp_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from mp_core.anamneses.api.views import AnamnesisViewSet
from mp_core.audit.api.views import AuditEventViewSet
from mp_core.consultations.api.views import ConsultationViewSet
from mp_core.dashboard.api.views import DashboardViewSet
from mp_core.exams.api.views import ExamViewSet
from mp_core.facilities.api.views import FacilityViewSet
from mp_core.finance.api.views import BillViewSet, FinancialTransactionViewSet, RecurringTransactionViewSet
from mp_core.iam.api.auth import LoginView, LogoutView, RefreshView
from mp_core.iam.api.me import MeProfileView, MeView
from mp_core.medical_records.api.views import MedicalRecordViewSet
from mp_core.medications.api.views import MedicationViewSet
from mp_core.notes.api.views import NoteViewSet
from mp_core.patients.api.views import PatientViewSet
from mp_core.prescriptions.api.views import PrescriptionViewSet
from mp_core.schedule.api.views import ScheduleSlotViewSet
from mp_core.tenants.api.views import TenantViewSet
from mp_core.whatsapp.api.views import WhatsAppConnectionViewSet, WhatsAppMessageViewSet, WhatsAppReminderViewSet

router = DefaultRouter()

# Platform
router.register(r"tenants", TenantViewSet, basename="tenants")
router.register(r"facilities", FacilityViewSet, basename="facilities")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

# Clinical
router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"consultations", ConsultationViewSet, basename="consultations")
router.register(r"anamneses", AnamnesisViewSet, basename="anamneses")
router.register(r"notes", NoteViewSet, basename="notes")
router.register(r"exams", ExamViewSet, basename="exams")
router.register(r"medications", MedicationViewSet, basename="medications")
router.register(r"prescriptions", PrescriptionViewSet, basename="prescriptions")
router.register(r"medical-records", MedicalRecordViewSet, basename="medical-records")
router.register(r"schedule/slots", ScheduleSlotViewSet, basename="schedule-slots")

# Finance
router.register(r"finance/transactions", FinancialTransactionViewSet, basename="finance-transactions")
router.register(r"finance/recurring", RecurringTransactionViewSet, basename="finance-recurring")
router.register(r"finance/bills", BillViewSet, basename="finance-bills")

# WhatsApp
router.register(r"whatsapp/connections", WhatsAppConnectionViewSet, basename="whatsapp-connections")
router.register(r"whatsapp/messages", WhatsAppMessageViewSet, basename="whatsapp-messages")
router.register(r"whatsapp/reminders", WhatsAppReminderViewSet, basename="whatsapp-reminders")

router.register(r"dashboard", DashboardViewSet, basename="dashboard")

urlpatterns = [
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
    path("me/profile/", MeProfileView.as_view(), name="me-profile"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
