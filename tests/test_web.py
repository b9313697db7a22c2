from model.page import AircraftPage, NationPage


def create_usa(client):
    return client.post(
        "/pages",
        data={"title": "USA", "about": "Line1\nLine2", "techtree": "<b>x</b>"},
        follow_redirects=False,
    )


class TestCreate:
    def test_create_nation_redirects_to_view(self, client, page_store):
        response = create_usa(client)

        assert response.status_code == 303
        assert response.headers["location"] == "/pages/usa"
        assert isinstance(page_store.get("usa"), NationPage)

    def test_nation_view_scenario(self, client):
        create_usa(client)
        response = client.get("/pages/usa")

        assert response.status_code == 200
        assert "Line1<br>Line2" in response.text
        assert "<b>x</b>" in response.text

    def test_create_aircraft_without_upload(self, client, page_store):
        response = client.post(
            "/aircraft",
            data={"title": "A6M Zero", "about": "Carrier fighter"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/pages/a6m-zero"
        assert page_store.get("a6m-zero").loadout_img == ""
        assert "No image uploaded" in client.get("/pages/a6m-zero").text

    def test_create_aircraft_with_upload(self, client, page_store):
        response = client.post(
            "/aircraft",
            data={"title": "P-51 Mustang", "about": "Escort"},
            files={"loadout_img": ("loadout.png", b"\x89PNG", "image/png")},
            follow_redirects=False,
        )

        assert response.status_code == 303
        page = page_store.get("p-51-mustang")
        assert page.loadout_img == "/uploads/p-51-mustang-loadout.png"
        assert (page_store.uploads_dir / "p-51-mustang-loadout.png").read_bytes() == b"\x89PNG"

    def test_missing_required_field_is_rejected(self, client, page_store):
        response = client.post("/pages", data={"title": "USA"}, follow_redirects=False)

        assert response.status_code == 400
        assert page_store.list_slugs() == []


class TestView:
    def test_missing_page_is_404(self, client):
        response = client.get("/pages/does-not-exist")

        assert response.status_code == 404
        assert "Page not found" in response.text

    def test_corrupt_page_is_500(self, client, page_store):
        (page_store.pages_dir / "broken.json5").write_text("{oops", encoding="utf-8")

        response = client.get("/pages/broken")

        assert response.status_code == 500
        assert "Error loading page" in response.text
        assert "Traceback" not in response.text


class TestDelete:
    def test_delete_existing(self, client, page_store):
        create_usa(client)

        response = client.get("/delete/usa")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert page_store.list_slugs() == []

    def test_delete_missing(self, client):
        response = client.get("/delete/ghost")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Page not found"}


class TestEdit:
    def test_edit_form_without_slug_redirects_home(self, client):
        response = client.get("/edit.html", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/"

    def test_edit_form_for_missing_page(self, client):
        response = client.get("/edit.html", params={"slug": "ghost"})

        assert response.status_code == 404
        assert "Page not found" in response.text

    def test_edit_form_prefilled(self, client):
        create_usa(client)

        response = client.get("/edit.html", params={"slug": "usa"})

        assert response.status_code == 200
        assert 'action="/edit/usa"' in response.text
        assert 'value="USA"' in response.text

    def test_update_missing_page_is_404(self, client, page_store):
        response = client.post(
            "/edit/ghost",
            data={"title": "Ghost", "about": "Boo"},
            follow_redirects=False,
        )

        assert response.status_code == 404
        assert page_store.list_slugs() == []

    def test_update_keeps_slug_when_title_changes(self, client, page_store):
        create_usa(client)

        response = client.post(
            "/edit/usa",
            data={"title": "United States", "about": "New", "techtree": "<i>t</i>"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/pages/usa"
        page = page_store.get("usa")
        assert page.title == "United States"
        assert page.techtree == "<i>t</i>"
        assert page_store.list_slugs() == ["usa"]

    def test_update_without_upload_keeps_image(self, client, page_store):
        page_store.create(
            AircraftPage(
                title="Zero", about="A6M", loadout_img="/uploads/zero-loadout.png"
            )
        )

        client.post("/edit/zero", data={"title": "Zero", "about": "A6M2"})

        page = page_store.get("zero")
        assert page.about == "A6M2"
        assert page.loadout_img == "/uploads/zero-loadout.png"

    def test_update_with_upload_replaces_image(self, client, page_store):
        page_store.create(
            AircraftPage(
                title="Zero", about="A6M", loadout_img="/uploads/zero-loadout.png"
            )
        )

        client.post(
            "/edit/zero",
            data={"title": "Zero", "about": "A6M2"},
            files={"loadout_img": ("new.jpg", b"jpeg", "image/jpeg")},
        )

        assert page_store.get("zero").loadout_img == "/uploads/zero-loadout.jpg"
        html = client.get("/pages/zero").text
        assert "/uploads/zero-loadout.jpg" in html
        assert "/uploads/zero-loadout.png" not in html

    def test_update_with_blank_about_is_rejected(self, client, page_store):
        create_usa(client)

        response = client.post(
            "/edit/usa", data={"title": "USA", "about": ""}, follow_redirects=False
        )

        assert response.status_code == 400
        assert page_store.get("usa").about == "Line1\nLine2"


class TestListing:
    def test_lists_slugs(self, client):
        create_usa(client)
        client.post("/aircraft", data={"title": "A6M Zero", "about": "x"})

        response = client.get("/api/pages")

        assert response.json() == {"status": "success", "result": ["a6m-zero", "usa"]}

    def test_static_forms_served(self, client):
        assert client.get("/form.html").status_code == 200
        assert 'action="/aircraft"' in client.get("/aircraft-form.html").text
        assert client.get("/").status_code == 200


class TestUrlSafeSlugs:
    def test_question_mark_title_reachable_after_redirect(self, client, page_store):
        response = client.post(
            "/pages", data={"title": "Why?", "about": "Because"}, follow_redirects=False
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/pages/why%3F"
        page = client.get(response.headers["location"])
        assert page.status_code == 200
        assert "Because" in page.text

    def test_hash_title_edit_round_trip(self, client, page_store):
        client.post("/pages", data={"title": "Who #1", "about": "First"})

        form = client.get("/edit.html", params={"slug": "who-#1"})
        assert 'action="/edit/who-%231"' in form.text

        response = client.post(
            "/edit/who-%231",
            data={"title": "Who #1", "about": "Second"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/pages/who-%231"
        assert page_store.get("who-#1").about == "Second"


class TestUploadFailures:
    def test_unusable_slug_with_file_is_rejected(self, client, page_store):
        response = client.post(
            "/aircraft",
            data={"title": "F/A-18", "about": "Hornet"},
            files={"loadout_img": ("hornet.png", b"png", "image/png")},
            follow_redirects=False,
        )

        assert response.status_code == 400
        assert list(page_store.uploads_dir.iterdir()) == []
        assert page_store.list_slugs() == []

    def test_failed_upload_on_create_writes_no_record(self, client, page_store):
        page_store.uploads_dir.rmdir()
        page_store.uploads_dir.write_text("not a directory")

        response = client.post(
            "/aircraft",
            data={"title": "P-51 Mustang", "about": "Escort"},
            files={"loadout_img": ("loadout.png", b"png", "image/png")},
            follow_redirects=False,
        )

        assert response.status_code == 500
        assert "Error creating aircraft" in response.text
        assert page_store.list_slugs() == []

    def test_failed_upload_on_edit_leaves_record(self, client, page_store):
        original = AircraftPage(
            title="Zero", about="A6M", loadout_img="/uploads/zero-loadout.png"
        )
        page_store.create(original)
        page_store.uploads_dir.rmdir()
        page_store.uploads_dir.write_text("not a directory")

        response = client.post(
            "/edit/zero",
            data={"title": "Zero", "about": "A6M2"},
            files={"loadout_img": ("new.jpg", b"jpeg", "image/jpeg")},
            follow_redirects=False,
        )

        assert response.status_code == 500
        assert "Error updating page" in response.text
        assert page_store.get("zero") == original


class TestUploadServing:
    def test_uploaded_image_served_from_store(self, client, page_store):
        client.post(
            "/aircraft",
            data={"title": "Who #1", "about": "Mystery"},
            files={"loadout_img": ("shot.png", b"\x89PNG", "image/png")},
        )

        url = page_store.get("who-#1").loadout_img
        assert url == "/uploads/who-%231-loadout.png"
        response = client.get(url)
        assert response.status_code == 200
        assert response.content == b"\x89PNG"

    def test_missing_upload_is_404(self, client):
        assert client.get("/uploads/nothing.png").status_code == 404
