"""
Integration tests for the records API.

These tests exercise patient registration, the clinical timeline,
encounters and appointments, admissions, the hospitalization format and
the dashboards, including role based access control.  They use Django
REST Framework's APIClient within the APITestCase base class.
"""

from unittest import mock

from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from ..models import Admission, Appointment, AuditEvent, Encounter, Patient, User
from ..services.appointments import change_status
from ..services.hospitalization import SECTIONS
from ..services.patients import create_patient
from ..views.hospitalization import SECTION_SERIALIZERS


class RecordsAPITests(APITestCase):
    def setUp(self) -> None:
        """Create one user per staff role and one registered patient."""
        self.super_user = User.objects.create_user(
            username="super", password="Hospital123", role=User.ROLE_SUPER_ADMIN, nombre="Super Admin",
        )
        self.admin_user = User.objects.create_user(
            username="admin1", password="Hospital123", role=User.ROLE_ADMIN, nombre="Admisión",
        )
        self.medico = User.objects.create_user(
            username="medico1", password="Hospital123", role=User.ROLE_MEDICO,
            nombre="Dra. Pérez", especialidad="Cardiología",
        )
        self.admin = self.authenticate(self.admin_user)
        self.doctor = self.authenticate(self.medico)

        r = self.admin.post("/api/pacientes", {
            "nroHistoria": "12-34-56",
            "ci": "v12345678",
            "apellidosNombres": "Pérez Juan",
            "fechaNacimiento": "1990-06-15",
            "sexo": "M",
            "telefono": "0414-1234567",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self.patient_id = r.data["data"]["id"]

    def authenticate(self, user: User) -> APIClient:
        """Return an authenticated APIClient for the given user."""
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def _appointment(self, **overrides):
        payload = {
            "pacienteId": self.patient_id,
            "fecha": "2099-01-10",
            "hora": "1970-01-01T15:00:00.000Z",
            "especialidad": "Cardiología",
            "medicoId": self.medico.id,
            "motivo": "Control",
        }
        payload.update(overrides)
        r = self.admin.post("/api/citas", payload, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        return r.data["data"]

    def _clinical_admission(self, tipo="EMERGENCIA", fecha="2025-01-01"):
        r = self.admin.post("/api/admisiones", {
            "pacienteId": self.patient_id, "tipo": tipo, "servicio": "Urgencias",
            "fechaAdmision": fecha, "horaAdmision": "10:30", "formaIngreso": "AMBULANCIA",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        return r.data["data"]

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------
    def test_registration_normalizes_ci_and_opens_initial_admission(self):
        patient = Patient.objects.get(id=self.patient_id)
        self.assertEqual(patient.ci, "V-12345678")
        admissions = list(Admission.objects.filter(patient=patient))
        self.assertEqual(len(admissions), 1)
        self.assertIsNone(admissions[0].tipo)
        self.assertIsNone(admissions[0].servicio)
        self.assertEqual(admissions[0].forma_ingreso, "AMBULANTE")
        self.assertTrue(AuditEvent.objects.filter(action="patient_create", object_id=patient.id).exists())

    def test_duplicate_history_number_is_rejected(self):
        r = self.admin.post("/api/pacientes", {
            "nroHistoria": "12-34-56", "ci": "V-87654321", "apellidosNombres": "Otra Persona",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(r.data["ok"])

    def test_invalid_identifiers_use_error_envelope(self):
        r = self.admin.post("/api/pacientes", {
            "nroHistoria": "123456", "ci": "12345678", "apellidosNombres": "Sin Formato",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(r.data["ok"])
        self.assertIn("nroHistoria", r.data["error"]["message"])
        self.assertIn("ci", r.data["error"]["message"])

    def test_doctor_can_read_but_not_register_patients(self):
        r = self.doctor.get("/api/pacientes")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["pagination"]["total"], 1)
        r = self.doctor.post("/api/pacientes", {
            "nroHistoria": "65-43-21", "ci": "V-87654321", "apellidosNombres": "Otra Persona",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_requests_are_refused(self):
        r = APIClient().get("/api/pacientes")
        self.assertIn(r.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_search_by_ci_and_history_number(self):
        r = self.admin.get("/api/pacientes/search", {"ci": "V12345678"})
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["data"]["id"], self.patient_id)
        self.assertEqual(len(r.data["data"]["admisiones"]), 1)
        r = self.admin.get("/api/pacientes/search", {"nroHistoria": "12-34-56"})
        self.assertEqual(r.data["data"]["nroHistoria"], "12-34-56")
        r = self.admin.get("/api/pacientes/search", {"nroHistoria": "99-99-99"})
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        r = self.admin.get("/api/pacientes/search")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters_and_recent(self):
        self.admin.post("/api/pacientes", {
            "nroHistoria": "65-43-21", "ci": "E-7654321", "apellidosNombres": "Gómez Ana",
        }, format="json")
        r = self.admin.get("/api/pacientes", {"q": "gómez"})
        self.assertEqual([p["nroHistoria"] for p in r.data["data"]], ["65-43-21"])
        r = self.admin.get("/api/pacientes/ultimos")
        self.assertEqual([p["nroHistoria"] for p in r.data["data"]], ["65-43-21", "12-34-56"])

    def test_update_patient_and_military_record(self):
        r = self.admin.put(f"/api/pacientes/{self.patient_id}", {
            "direccion": "Av. Principal", "militar": {"grado": "Sargento", "componente": "Ejército"},
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_200_OK, r.data)
        self.assertEqual(r.data["data"]["direccion"], "Av. Principal")
        self.assertEqual(r.data["data"]["militar"]["grado"], "Sargento")
        self.assertEqual(r.data["data"]["apellidosNombres"], "Pérez Juan")

    def test_registration_race_on_unique_identifiers_is_a_validation_error(self):
        # Both pre-insert duplicate checks miss, as when two requests register the same patient at once
        with mock.patch("django.db.models.query.QuerySet.exists", return_value=False):
            with self.assertRaises(ValueError):
                create_patient(self.admin_user, {
                    "nroHistoria": "12-34-56", "ci": "V-87654321", "apellidosNombres": "Otra Persona",
                })
        self.assertEqual(Patient.objects.count(), 1)
        self.assertEqual(Admission.objects.count(), 1)

    def test_unknown_patient_is_404(self):
        r = self.admin.get("/api/pacientes/999999")
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(r.data["ok"])

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------
    def test_timeline_merges_and_orders_all_records(self):
        self._clinical_admission()
        r = self.doctor.post("/api/encuentros", {
            "pacienteId": self.patient_id, "tipo": "CONSULTA", "fecha": "2024-06-15", "hora": "09:00:00",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self._appointment()

        r = self.admin.get(f"/api/pacientes/{self.patient_id}/timeline")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        events = r.data["data"]
        self.assertEqual(r.data["count"], 5)
        self.assertEqual([e["tipo"] for e in events], ["cita", "registro", "admision", "admision", "encuentro"])
        self.assertEqual((events[0]["fecha"], events[0]["hora"]), ("2099-01-10", "15:00"))
        self.assertEqual(events[2]["titulo"], "Registro inicial")
        self.assertEqual(events[3]["color"], "danger")
        self.assertIn("Dra. Pérez (Cardiología)", events[4]["descripcion"])

    # ------------------------------------------------------------------
    # Encounters & appointments
    # ------------------------------------------------------------------
    def test_encounter_with_vitals_and_impressions(self):
        r = self.doctor.post("/api/encuentros", {
            "pacienteId": self.patient_id, "tipo": "EMERGENCIA", "motivoConsulta": "Dolor torácico",
            "signosVitales": [{"taSistolica": 140, "taDiastolica": 90, "pulso": 98, "temperatura": "37.5"}],
            "impresiones": [{"codigoCie": "I20", "descripcion": "Angina", "clase": "PRESUNTIVA"}],
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        data = r.data["data"]
        self.assertEqual(data["signosVitales"][0]["pulso"], 98)
        self.assertEqual(data["impresiones"][0]["codigoCie"], "I20")
        self.assertEqual(data["createdBy"]["id"], self.medico.id)

        r = self.admin.get(f"/api/encuentros/{data['id']}")
        self.assertEqual(r.data["data"]["paciente"]["nroHistoria"], "12-34-56")
        r = self.admin.get("/api/encuentros/hoy")
        self.assertEqual(r.data["count"], 1)

    def test_admin_cannot_record_encounters(self):
        r = self.admin.post("/api/encuentros", {"pacienteId": self.patient_id, "tipo": "CONSULTA"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_encounters_by_patient_are_newest_first(self):
        for fecha, hora in [("2024-01-01", "08:00"), ("2024-03-01", "07:00"), ("2024-03-01", "18:00")]:
            self.doctor.post("/api/encuentros", {
                "pacienteId": self.patient_id, "tipo": "CONSULTA", "fecha": fecha, "hora": hora,
            }, format="json")
        r = self.admin.get(f"/api/encuentros/paciente/{self.patient_id}")
        self.assertEqual([(e["fecha"], e["hora"]) for e in r.data["data"]],
                         [("2024-03-01", "18:00"), ("2024-03-01", "07:00"), ("2024-01-01", "08:00")])

    def test_encounters_by_type_validates_type(self):
        self.doctor.post("/api/encuentros", {"pacienteId": self.patient_id, "tipo": "CONSULTA"}, format="json")
        r = self.admin.get("/api/encuentros/tipo/consulta")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["tipo"], "CONSULTA")
        self.assertEqual(r.data["count"], 1)
        r = self.admin.get("/api/encuentros/tipo/visita")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("OTRO", r.data["tiposPermitidos"])

    def test_attending_an_appointment_completes_it(self):
        cita = self._appointment()
        r = self.doctor.post("/api/encuentros/desde-cita", {"citaId": cita["id"], "motivoConsulta": "Control"},
                             format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self.assertEqual(r.data["data"]["citaId"], cita["id"])
        self.assertEqual(r.data["data"]["fecha"], "2099-01-10")
        self.assertEqual(Appointment.objects.get(id=cita["id"]).estado, Appointment.ESTADO_COMPLETADA)

        r = self.doctor.post("/api/encuentros/desde-cita", {"citaId": cita["id"]}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Encounter.objects.filter(cita_id=cita["id"]).count(), 1)

    def test_appointment_rejects_bad_time_and_unknown_doctor(self):
        r = self.admin.post("/api/citas", {
            "pacienteId": self.patient_id, "fecha": "2099-01-10", "hora": "mañana", "especialidad": "Pediatría",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = self.admin.post("/api/citas", {
            "pacienteId": self.patient_id, "fecha": "2099-01-10", "hora": "10:00",
            "especialidad": "Pediatría", "medicoId": self.admin_user.id,
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancelled_appointment_is_final(self):
        cita = self._appointment()
        r = self.admin.post(f"/api/citas/{cita['id']}/estado", {"estado": "CANCELADA"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["data"]["estado"], "CANCELADA")
        r = self.admin.post(f"/api/citas/{cita['id']}/estado", {"estado": "COMPLETADA"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(r.data["ok"])

    def test_status_change_rechecks_the_stored_status(self):
        cita = self._appointment()
        stale = Appointment.objects.get(id=cita["id"])
        r = self.doctor.post("/api/encuentros/desde-cita", {"citaId": cita["id"]}, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)

        self.assertEqual(stale.estado, Appointment.ESTADO_PROGRAMADA)
        with self.assertRaises(ValueError):
            change_status(self.admin_user, stale, Appointment.ESTADO_CANCELADA)
        self.assertEqual(Appointment.objects.get(id=cita["id"]).estado, Appointment.ESTADO_COMPLETADA)

    def test_appointment_list_filters(self):
        self._appointment()
        self._appointment(fecha="2099-02-01", hora="08:00")
        r = self.admin.get("/api/citas", {"fecha": "2099-02-01"})
        self.assertEqual(r.data["count"], 1)
        r = self.admin.get("/api/citas", {"pacienteId": self.patient_id, "estado": "PROGRAMADA"})
        self.assertEqual(r.data["count"], 2)

    # ------------------------------------------------------------------
    # Admissions
    # ------------------------------------------------------------------
    def test_discharge_closes_admission_once(self):
        adm = self._clinical_admission(tipo="HOSPITALIZACION")
        r = self.admin.get("/api/admisiones/activas")
        self.assertEqual([a["id"] for a in r.data["data"]], [adm["id"]])

        r = self.admin.post(f"/api/admisiones/{adm['id']}/alta", {"fechaAlta": "2025-01-05"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_200_OK, r.data)
        self.assertEqual(r.data["data"]["estado"], "ALTA")
        r = self.admin.post(f"/api/admisiones/{adm['id']}/alta", {}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        r = self.admin.get("/api/admisiones/activas")
        self.assertEqual(r.data["count"], 0)

    def test_discharge_before_admission_date_is_rejected(self):
        adm = self._clinical_admission(fecha="2025-01-10")
        r = self.admin.post(f"/api/admisiones/{adm['id']}/alta", {"fechaAlta": "2025-01-01"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    # ------------------------------------------------------------------
    # Hospitalization format
    # ------------------------------------------------------------------
    def test_hospitalization_format_sections(self):
        adm = self._clinical_admission(tipo="HOSPITALIZACION")
        r = self.doctor.post("/api/formato-hospitalizacion", {"admisionId": adm["id"]}, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        fid = r.data["data"]["id"]
        r = self.doctor.post("/api/formato-hospitalizacion", {"admisionId": adm["id"]}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

        r = self.doctor.post(f"/api/formato-hospitalizacion/{fid}/signos-vitales", {
            "fecha": "2025-01-02", "hora": "08:00", "pulso": 88, "temperatura": "37.2",
        }, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        sv_id = r.data["data"]["id"]
        self.assertEqual(r.data["data"]["temperatura"], "37.2")

        r = self.doctor.put(f"/api/formato-hospitalizacion/signos-vitales/{sv_id}", {"pulso": 92}, format="json")
        self.assertEqual(r.data["data"]["pulso"], 92)

        self.doctor.post(f"/api/formato-hospitalizacion/{fid}/orden-medica",
                         {"fecha": "2025-01-02", "indicacion": "Reposo absoluto"}, format="json")
        r = self.doctor.get(f"/api/formato-hospitalizacion/{fid}/ordenes-medicas")
        self.assertEqual(r.data["count"], 1)
        self.assertFalse(r.data["data"][0]["ejecutada"])

        r = self.doctor.post(f"/api/formato-hospitalizacion/{fid}/evolucion-medica",
                             {"fecha": "2025-01-03", "nota": "Evoluciona favorablemente"}, format="json")
        self.assertEqual(r.data["data"]["medico"]["id"], self.medico.id)

        first = self.doctor.put(f"/api/formato-hospitalizacion/{fid}/resumen-ingreso", {"plan": "Observación"},
                                format="json")
        second = self.doctor.put(f"/api/formato-hospitalizacion/{fid}/resumen-ingreso",
                                 {"diagnosticoIngreso": "Neumonía"}, format="json")
        self.assertEqual(first.data["data"]["id"], second.data["data"]["id"])
        self.assertEqual(second.data["data"]["plan"], "Observación")

        r = self.doctor.delete(f"/api/formato-hospitalizacion/signos-vitales/{sv_id}")
        self.assertEqual(r.status_code, status.HTTP_204_NO_CONTENT)

        r = self.admin.get(f"/api/formato-hospitalizacion/admision/{adm['id']}")
        data = r.data["data"]
        self.assertEqual(data["signosVitales"], [])
        self.assertEqual(len(data["ordenesMedicas"]), 1)
        self.assertEqual(len(data["evolucionesMedicas"]), 1)
        self.assertEqual(data["resumenIngreso"]["diagnosticoIngreso"], "Neumonía")

    def test_every_format_section_accepts_entries(self):
        self.assertEqual(set(SECTION_SERIALIZERS), set(SECTIONS))
        adm = self._clinical_admission(tipo="HOSPITALIZACION")
        fid = self.doctor.post("/api/formato-hospitalizacion", {"admisionId": adm["id"]}, format="json").data["data"]["id"]
        r = self.doctor.post(f"/api/formato-hospitalizacion/{fid}/laboratorio",
                             {"fecha": "2025-01-02", "examen": "Hematología", "resultado": "Normal"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_201_CREATED, r.data)
        self.assertEqual(r.data["data"]["examen"], "Hematología")
        r = self.doctor.post(f"/api/formato-hospitalizacion/{fid}/laboratorio", {"fecha": "2025-01-02"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_format_section_is_404(self):
        adm = self._clinical_admission()
        fid = self.doctor.post("/api/formato-hospitalizacion", {"admisionId": adm["id"]}, format="json").data["data"]["id"]
        r = self.doctor.post(f"/api/formato-hospitalizacion/{fid}/radiografia", {"fecha": "2025-01-02"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------
    def test_admin_dashboard_is_cached_until_a_write(self):
        first = self.admin.get("/api/dashboard/admin")
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["stats"]["totalPacientes"], 1)
        self.assertEqual([v["id"] for v in first.data["views"]],
                         ["register-patient", "create-appointment", "search-patient"])
        again = self.admin.get("/api/dashboard/admin")
        self.assertEqual(again.data["generatedAt"], first.data["generatedAt"])

        self.admin.post("/api/pacientes", {
            "nroHistoria": "65-43-21", "ci": "V-7654321", "apellidosNombres": "Gómez Ana",
        }, format="json")
        after = self.admin.get("/api/dashboard/admin")
        self.assertEqual(after.data["stats"]["totalPacientes"], 2)

    def test_doctor_dashboard_and_role_split(self):
        self._clinical_admission(tipo="HOSPITALIZACION")
        r = self.doctor.get("/api/dashboard/medico")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["stats"]["pacientesActivos"], 1)
        self.assertEqual(r.data["stats"]["altasPendientes"], 1)
        self.assertEqual(self.doctor.get("/api/dashboard/admin").status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.admin.get("/api/dashboard/medico").status_code, status.HTTP_403_FORBIDDEN)

    def test_dashboard_navigation(self):
        r = self.admin.post("/api/dashboard/admin/navegar", {"action": "search-patient"}, format="json")
        self.assertEqual(r.data["view"], "search-patient")
        r = self.admin.post("/api/dashboard/admin/navegar", {"current": "search-patient", "action": "back"},
                            format="json")
        self.assertEqual(r.data["view"], "main")
        r = self.doctor.post("/api/dashboard/medico/navegar",
                             {"current": "patients", "action": "new-admission"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_healthz(self):
        r = APIClient().get("/healthz")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["ok"])
