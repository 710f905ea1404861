import io
import json
import os
from unittest import mock

from sqlalchemy.exc import SQLAlchemyError

from conftest import add
from extensions import db
from models import (
    AdditionalOption,
    AdminCredential,
    GalleryCard,
    MeetingPoint,
    Paquete,
    PrivateTour,
    PrivateTourBooking,
    SiteSettings,
    VideoSet,
)
from storage import StorageError


def _uploaded_files(app, bucket):
    root = os.path.join(app.config["UPLOAD_FOLDER"], bucket)
    return [f for _, _, files in os.walk(root) for f in files]


def _url(bucket, path):
    return f"http://testserver/uploads/{bucket}/{path}"


def test_requires_existing_admin(client, auth_headers, admin):
    db.session.delete(admin)
    db.session.commit()
    assert client.get("/admin/tours", headers=auth_headers).status_code == 403


def test_create_tour_with_image(client, app, auth_headers):
    resp = client.post(
        "/admin/tours",
        headers=auth_headers,
        data={
            "titulo": "Manglares",
            "precio_por_persona": "45",
            "max_personas": "10",
            "imagen1": (io.BytesIO(b"img"), "kayak.png"),
        },
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    tour = resp.get_json()["tour"]
    assert tour["precio_por_persona"] == 45.0
    assert tour["max_personas"] == 10
    assert tour["imagen1"].startswith("http://testserver/uploads/paquetes/paquetes/")
    assert tour["imagen1"].endswith("_imagen1_kayak.png")
    assert len(_uploaded_files(app, "paquetes")) == 1


def test_create_tour_json(client, auth_headers):
    resp = client.post(
        "/admin/tours",
        headers=auth_headers,
        json={"titulo": "Snorkel", "incluye": '["Equipo"]', "categoria": "water-adventure"},
    )
    assert resp.status_code == 201
    assert Paquete.query.count() == 1


def test_create_tour_json_list_for_included(client, auth_headers):
    resp = client.post(
        "/admin/tours",
        headers=auth_headers,
        json={"titulo": "Snorkel", "incluye": ["Equipo", "Agua"]},
    )
    assert resp.status_code == 201
    assert json.loads(Paquete.query.one().incluye) == ["Equipo", "Agua"]
    assert client.get("/tours").get_json()[0]["included"] == ["Equipo", "Agua"]


def test_included_must_be_a_json_array(client, auth_headers):
    resp = client.post("/admin/tours", headers=auth_headers, json={"titulo": "x", "incluye": "Equipo"})
    assert resp.status_code == 400
    resp = client.post("/admin/tours", headers=auth_headers, json={"titulo": "x", "incluye": {"a": 1}})
    assert resp.status_code == 400
    assert Paquete.query.count() == 0


def test_unknown_field_rejected(client, auth_headers):
    resp = client.post("/admin/tours", headers=auth_headers, json={"titulo": "x", "precio": 10})
    assert resp.status_code == 400
    assert "precio" in resp.get_json()["message"]
    assert Paquete.query.count() == 0


def test_bad_number_rejected(client, auth_headers):
    resp = client.post("/admin/tours", headers=auth_headers, json={"titulo": "x", "price": "abc"})
    assert resp.status_code == 400


def test_missing_title_rejected(client, auth_headers):
    resp = client.post("/admin/tours", headers=auth_headers, json={"descripcion": "x"})
    assert resp.status_code == 400


def test_bad_file_type_rejected(client, app, auth_headers):
    resp = client.post(
        "/admin/tours",
        headers=auth_headers,
        data={"titulo": "x", "imagen1": (io.BytesIO(b"x"), "virus.exe")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert _uploaded_files(app, "paquetes") == []


def test_failed_row_write_removes_new_uploads(client, app, auth_headers):
    with mock.patch("sqlalchemy.orm.Session.commit", side_effect=SQLAlchemyError("db down")):
        resp = client.post(
            "/admin/gallery",
            headers=auth_headers,
            data={"title": "Atardecer", "portada": (io.BytesIO(b"img"), "sol.jpg")},
            content_type="multipart/form-data",
        )
    assert resp.status_code == 500
    assert "db down" in resp.get_json()["message"]
    assert _uploaded_files(app, "galery") == []


def test_update_replaces_previous_blob(client, app, auth_headers):
    created = client.post(
        "/admin/gallery",
        headers=auth_headers,
        data={"title": "A", "portada": (io.BytesIO(b"1"), "uno.jpg")},
        content_type="multipart/form-data",
    ).get_json()["item"]

    updated = client.put(
        f"/admin/gallery/{created['id']}",
        headers=auth_headers,
        data={"portada": (io.BytesIO(b"2"), "dos.jpg")},
        content_type="multipart/form-data",
    )
    assert updated.status_code == 200
    files = _uploaded_files(app, "galery")
    assert len(files) == 1
    assert files[0].endswith("_portada_dos.jpg")


def test_clearing_a_slot_removes_its_blob(client, app, auth_headers):
    created = client.post(
        "/admin/gallery",
        headers=auth_headers,
        data={"title": "A", "portada": (io.BytesIO(b"1"), "uno.jpg")},
        content_type="multipart/form-data",
    ).get_json()["item"]
    assert len(_uploaded_files(app, "galery")) == 1

    resp = client.put(
        f"/admin/gallery/{created['id']}",
        headers=auth_headers,
        data={"portada": ""},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert db.session.get(GalleryCard, created["id"]).portada is None
    assert _uploaded_files(app, "galery") == []


def test_gallery_delete_removes_one_blob_per_populated_slot(client, auth_headers):
    card = add(GalleryCard(
        title="Arrecife",
        portada=_url("galery", "gallery/1_portada_a.jpg"),
        imagen1=_url("galery", "gallery/1_imagen1_b.jpg"),
        imagen2=None,
        imagen3=_url("galery", "gallery/1_imagen3_c.jpg"),
    ))

    with mock.patch("storage.Bucket.remove", return_value=[]) as remove:
        resp = client.delete(f"/admin/gallery/{card.id}", headers=auth_headers)

    assert resp.status_code == 200
    assert remove.call_count == 3
    removed = [c.args[0] for c in remove.call_args_list]
    assert ["gallery/1_portada_a.jpg"] in removed
    assert GalleryCard.query.count() == 0


def test_gallery_delete_continues_when_remove_fails(client, auth_headers):
    card = add(GalleryCard(
        title="Arrecife",
        portada=_url("galery", "gallery/1_portada_a.jpg"),
        imagen4=_url("galery", "gallery/1_imagen4_d.jpg"),
    ))

    with mock.patch("storage.Bucket.remove", side_effect=StorageError("bucket caído")) as remove:
        resp = client.delete(f"/admin/gallery/{card.id}", headers=auth_headers)

    assert resp.status_code == 200
    assert remove.call_count == 2
    assert GalleryCard.query.count() == 0


def test_videos_singleton_and_slot_delete(client, app, auth_headers):
    resp = client.put(
        "/admin/videos",
        headers=auth_headers,
        data={"video1": (io.BytesIO(b"v"), "intro.mp4")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    assert "/uploads/galery/videos/" in resp.get_json()["videos"]["video1"]

    resp = client.put("/admin/videos", headers=auth_headers, json={"video2": "https://cdn.test/v2.mp4"})
    assert resp.status_code == 200
    assert VideoSet.query.count() == 1

    resp = client.delete("/admin/videos/video1", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["videos"]["video1"] is None
    assert _uploaded_files(app, "galery") == []

    assert client.delete("/admin/videos/video3", headers=auth_headers).status_code == 400
    assert client.delete("/admin/videos/video1", headers=auth_headers).status_code == 404


def test_video_slot_rejects_images(client, auth_headers):
    resp = client.put(
        "/admin/videos",
        headers=auth_headers,
        data={"video1": (io.BytesIO(b"v"), "foto.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400


def test_meeting_points_crud_and_toggle(client, auth_headers):
    resp = client.post("/admin/meeting-points", headers=auth_headers, json={"title": "Muelle", "zone": "West End"})
    assert resp.status_code == 201
    point = resp.get_json()["meeting_point"]
    assert point["is_active"] is True

    resp = client.patch(f"/admin/meeting-points/{point['id']}/toggle", headers=auth_headers)
    assert resp.get_json()["meeting_point"]["is_active"] is False

    resp = client.put(f"/admin/meeting-points/{point['id']}", headers=auth_headers, json={"is_active": "true"})
    assert resp.get_json()["meeting_point"]["is_active"] is True

    assert client.delete(f"/admin/meeting-points/{point['id']}", headers=auth_headers).status_code == 200
    assert MeetingPoint.query.count() == 0
    assert client.patch("/admin/meeting-points/999/toggle", headers=auth_headers).status_code == 404


def test_private_tour_create_with_days(client, auth_headers):
    resp = client.post(
        "/admin/private-tours",
        headers=auth_headers,
        json={
            "title": "East End Privado",
            "price_1_person": 120,
            "show_additional_options": True,
            "available_days": ["Monday", "Friday"],
        },
    )
    assert resp.status_code == 201
    body = resp.get_json()["private_tour"]
    assert body["available_days"] == ["Monday", "Friday"]
    assert body["show_additional_options"] is True


def test_private_tour_delete_keeps_bookings(client, auth_headers):
    tour = add(PrivateTour(title="X"))
    booking = add(PrivateTourBooking(tour_id=tour.id, first_name="A", last_name="B", email="a@b.c"))
    booking_id = booking.id

    assert client.delete(f"/admin/private-tours/{tour.id}", headers=auth_headers).status_code == 200
    kept = db.session.get(PrivateTourBooking, booking_id)
    assert kept is not None
    assert kept.tour_id is None


def test_booking_status(client, auth_headers):
    tour = add(PrivateTour(title="X"))
    booking = add(PrivateTourBooking(tour_id=tour.id, first_name="A", last_name="B", email="a@b.c"))

    resp = client.get("/admin/private-tour-bookings?status=pending", headers=auth_headers)
    assert [b["id"] for b in resp.get_json()] == [booking.id]
    assert resp.get_json()[0]["tour_title"] == "X"

    resp = client.patch(
        f"/admin/private-tour-bookings/{booking.id}/status",
        headers=auth_headers,
        json={"status": "confirmed"},
    )
    assert resp.get_json()["booking"]["status"] == "confirmed"

    resp = client.patch(
        f"/admin/private-tour-bookings/{booking.id}/status",
        headers=auth_headers,
        json={"status": "done"},
    )
    assert resp.status_code == 400


def test_status_changes_report_commit_failures(client, auth_headers):
    point = add(MeetingPoint(title="Muelle"))
    tour = add(PrivateTour(title="X"))
    booking = add(PrivateTourBooking(tour_id=tour.id, first_name="A", last_name="B", email="a@b.c"))
    point_id, booking_id = point.id, booking.id

    with mock.patch("sqlalchemy.orm.Session.commit", side_effect=SQLAlchemyError("db down")):
        toggled = client.patch(f"/admin/meeting-points/{point_id}/toggle", headers=auth_headers)
        status = client.patch(
            f"/admin/private-tour-bookings/{booking_id}/status",
            headers=auth_headers,
            json={"status": "confirmed"},
        )

    assert toggled.status_code == 500
    assert toggled.get_json() == {"message": "db down"}
    assert status.status_code == 500
    assert status.get_json() == {"message": "db down"}
    assert db.session.get(MeetingPoint, point_id).is_active is True
    assert db.session.get(PrivateTourBooking, booking_id).status == "pending"


def test_additional_options_sorted(client, auth_headers):
    add(AdditionalOption(title="B", sort_order=2), AdditionalOption(title="A", sort_order=1))
    resp = client.get("/admin/additional-options", headers=auth_headers)
    assert [o["title"] for o in resp.get_json()] == ["A", "B"]

    resp = client.post("/admin/additional-options", headers=auth_headers, json={"title": "C", "sort_order": "0"})
    assert resp.get_json()["option"]["sort_order"] == 0


def test_settings_upsert_with_logo(client, app, auth_headers):
    assert client.get("/admin/settings", headers=auth_headers).get_json() is None

    resp = client.put(
        "/admin/settings",
        headers=auth_headers,
        data={"nombre_web": "Roatan East", "logo": (io.BytesIO(b"l"), "logo.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert "/uploads/principal/admin/" in resp.get_json()["settings"]["logo"]

    client.put("/admin/settings", headers=auth_headers, json={"celular": "+504 3226-7504"})
    assert SiteSettings.query.count() == 1
    assert SiteSettings.query.first().nombre_web == "Roatan East"


def test_credentials(client, auth_headers):
    assert client.get("/admin/credentials", headers=auth_headers).get_json() == {"username": "admin"}

    resp = client.put(
        "/admin/credentials",
        headers=auth_headers,
        json={"username": "admin", "password": "nueva-clave", "confirm_password": "otra"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Passwords do not match"

    resp = client.put(
        "/admin/credentials",
        headers=auth_headers,
        json={"username": "admin", "password": "nueva-clave", "confirm_password": "nueva-clave"},
    )
    assert resp.status_code == 200
    stored = AdminCredential.query.filter_by(username="admin").first().password_hash
    assert stored.startswith("$2b$")

    login = client.post("/auth/login", json={"username": "admin", "password": "nueva-clave"})
    assert login.status_code == 200

    assert client.put("/admin/credentials", headers=auth_headers, json={}).status_code == 400


def test_dashboard_counts(client, auth_headers):
    add(Paquete(titulo="a"), Paquete(titulo="b"), MeetingPoint(title="m", is_active=False))
    body = client.get("/admin/dashboard", headers=auth_headers).get_json()
    assert body["tours"] == 2
    assert body["meeting_points"] == 1
    assert body["meeting_points_activos"] == 0
    assert body["bookings_estado"] == {"pending": 0, "confirmed": 0, "cancelled": 0}
