import base64
import os
import tempfile
import unittest
from unittest.mock import patch

from bson import ObjectId

from services.gallery_service import GalleryService, decode_image_data
from services.upload_store import LocalUploadStore
from utils.errors import BadRequest, UnsupportedMediaType, ValidationError
from fakes import FlakyCollection, build_client, make_storage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class GalleryServiceTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.upload_dir = tmp.name
        self.storage = make_storage()
        self.uploads = LocalUploadStore(self.upload_dir)
        self.service = GalleryService(self.storage, self.uploads)

    def test_list_orders_by_order_then_insertion(self):
        for title, order in (("a", 2), ("b", 1), ("c", 2), ("d", 0)):
            self.service.add(title, f"https://cdn.example.com/{title}.png", None, order)
        self.assertEqual([image["title"] for image in self.service.list()], ["d", "b", "a", "c"])

    def test_add_requires_image_url(self):
        with self.assertRaises(ValidationError):
            self.service.add("title", None, None, None)

    def test_add_applies_defaults(self):
        image = self.service.add(None, "https://cdn.example.com/x.png", None, "")
        self.assertEqual(image["title"], "Untitled")
        self.assertEqual(image["alt"], "")
        self.assertEqual(image["order"], 0)

    def test_non_numeric_order_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.add("t", "https://cdn.example.com/x.png", None, "first")

    def test_upload_file_rejects_other_types_before_writing(self):
        with self.assertRaises(UnsupportedMediaType):
            self.service.upload_file(b"%PDF-1.4", "application/pdf", "doc.pdf")
        self.assertEqual(os.listdir(self.upload_dir), [])
        self.assertEqual(self.storage.carousel_images.count_documents({}), 0)

    def test_upload_file_writes_file_and_record(self):
        image = self.service.upload_file(PNG_BYTES, "image/png", "hero.png", title="Hero", alt="hero", order="3")
        self.assertTrue(image["imageUrl"].startswith("/uploads/"))
        self.assertTrue(image["imageUrl"].endswith(".png"))
        self.assertEqual(image["order"], 3)

        path = self.uploads.path_for(image["imageUrl"])
        with open(path, "rb") as f:
            self.assertEqual(f.read(), PNG_BYTES)

    def test_upload_file_removes_file_when_record_fails(self):
        self.storage.carousel_images = FlakyCollection(self.storage.carousel_images, "insert_one")
        service = GalleryService(self.storage, self.uploads)
        with self.assertRaises(BadRequest):
            service.upload_file(PNG_BYTES, "image/png", "hero.png")
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_upload_base64_removes_file_when_record_fails(self):
        self.storage.carousel_images = FlakyCollection(self.storage.carousel_images, "insert_one")
        service = GalleryService(self.storage, self.uploads)
        data = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        with self.assertRaises(BadRequest):
            service.upload_base64("t", data)
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_upload_base64_strips_prefix_and_always_uses_png(self):
        data = "data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode()
        image = self.service.upload_base64(None, data)
        name = os.path.basename(image["imageUrl"])
        self.assertTrue(name.startswith("base64-"))
        self.assertTrue(name.endswith(".png"))
        with open(self.uploads.path_for(image["imageUrl"]), "rb") as f:
            self.assertEqual(f.read(), b"jpeg-bytes")

    def test_upload_base64_without_prefix(self):
        image = self.service.upload_base64("t", base64.b64encode(PNG_BYTES).decode())
        with open(self.uploads.path_for(image["imageUrl"]), "rb") as f:
            self.assertEqual(f.read(), PNG_BYTES)

    def test_upload_base64_requires_data(self):
        with self.assertRaises(BadRequest):
            self.service.upload_base64("t", "")

    def test_upload_base64_rejects_unsupported_declared_type(self):
        with self.assertRaises(UnsupportedMediaType):
            self.service.upload_base64("t", "data:image/svg+xml;base64,PHN2Zz4=")
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_decode_image_data_accepts_missing_padding(self):
        self.assertEqual(decode_image_data("YWJjZA"), (b"abcd", None))
        self.assertEqual(decode_image_data("data:image/png;base64,YWI"), (b"ab", "image/png"))

    def test_decode_image_data_accepts_url_safe_alphabet(self):
        raw = b"\xfb\xff\xbf"
        self.assertEqual(decode_image_data(base64.urlsafe_b64encode(raw).decode()), (raw, None))
        self.assertEqual(decode_image_data("+/+/\n+/+/")[0], base64.b64decode("+/+/+/+/"))

    def test_fractional_order_is_kept(self):
        self.assertEqual(self.service.add("t", "https://cdn.example.com/x.png", None, 1.5)["order"], 1.5)
        self.assertEqual(self.service.add("u", "https://cdn.example.com/y.png", None, "2.0")["order"], 2)
        self.assertEqual([image["title"] for image in self.service.list()], ["t", "u"])

    def test_non_finite_order_is_rejected(self):
        for order in ("nan", "inf", True):
            with self.assertRaises(ValidationError):
                self.service.add("t", "https://cdn.example.com/x.png", None, order)

    def test_delete_external_image_does_not_touch_files(self):
        image = self.service.add("t", "https://cdn.example.com/x.png", None, 0)
        with patch.object(LocalUploadStore, "remove") as remove:
            self.service.delete(image["id"])
        remove.assert_not_called()
        self.assertEqual(self.storage.carousel_images.count_documents({}), 0)

    def test_delete_uploaded_image_removes_file(self):
        image = self.service.upload_file(PNG_BYTES, "image/webp", "a.webp")
        self.service.delete(image["id"])
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_delete_survives_missing_file(self):
        image = self.service.upload_file(PNG_BYTES, "image/gif", "a.gif")
        os.remove(self.uploads.path_for(image["imageUrl"]))
        self.service.delete(image["id"])
        self.assertEqual(self.storage.carousel_images.count_documents({}), 0)

    def test_delete_unknown_id(self):
        self.service.delete(str(ObjectId()))
        self.service.delete("not-an-id")

    def test_path_for_stays_inside_upload_dir(self):
        self.assertIsNone(self.uploads.path_for("/uploads/../main.py"))
        self.assertIsNone(self.uploads.path_for("/uploads/"))
        self.assertIsNone(self.uploads.path_for("https://cdn.example.com/x.png"))
        self.assertEqual(self.uploads.path_for("/uploads/a.png"), os.path.join(self.upload_dir, "a.png"))


class CarouselRoutesTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.upload_dir = tmp.name
        self.storage = make_storage()
        self.client = build_client(self.storage, self.upload_dir)

    def test_add_and_list(self):
        response = self.client.post(
            "/api/carousel",
            json={"title": "Banner", "imageUrl": "https://cdn.example.com/b.png", "alt": "b", "order": 2},
        )
        self.assertEqual(response.status_code, 200)
        image = response.json()
        self.assertEqual(image["order"], 2)

        listed = self.client.get("/api/carousel").json()
        self.assertEqual([item["id"] for item in listed], [image["id"]])

    def test_add_without_url_is_400(self):
        response = self.client.post("/api/carousel", json={"title": "Banner"})
        self.assertEqual(response.status_code, 400)

    def test_multipart_upload_is_served(self):
        response = self.client.post(
            "/api/carousel/upload",
            files={"image": ("hero.png", PNG_BYTES, "image/png")},
            data={"title": "Hero", "order": "1"},
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertTrue(payload["success"])
        self.assertEqual(payload["message"], "Image uploaded successfully")
        self.assertEqual(payload["data"]["title"], "Hero")

        served = self.client.get(payload["data"]["imageUrl"])
        self.assertEqual(served.status_code, 200)
        self.assertEqual(served.content, PNG_BYTES)

    def test_multipart_upload_rejects_pdf(self):
        response = self.client.post(
            "/api/carousel/upload",
            files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Only image files are allowed"})
        self.assertEqual(os.listdir(self.upload_dir), [])

    def test_multipart_upload_without_file(self):
        response = self.client.post("/api/carousel/upload", data={"title": "Hero"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No image file provided"})

    def test_base64_upload(self):
        data = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        response = self.client.post("/api/carousel/upload-base64", json={"imageData": data, "alt": "x"})
        self.assertEqual(response.status_code, 200)
        image = response.json()["data"]
        self.assertEqual(image["title"], "Untitled")
        self.assertEqual(self.client.get(image["imageUrl"]).content, PNG_BYTES)

    def test_add_with_fractional_order(self):
        response = self.client.post("/api/carousel", json={"imageUrl": "http://x/a.png", "order": 1.5})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["order"], 1.5)

    def test_base64_upload_without_padding(self):
        response = self.client.post("/api/carousel/upload-base64", json={"imageData": "YWJjZA"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(response.json()["data"]["imageUrl"]).content, b"abcd")

    def test_base64_upload_without_data(self):
        response = self.client.post("/api/carousel/upload-base64", json={"title": "t"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "No image data provided"})

    def test_delete_route(self):
        uploaded = self.client.post(
            "/api/carousel/upload",
            files={"image": ("hero.jpg", b"jpeg", "image/jpeg")},
        ).json()["data"]
        response = self.client.delete(f"/api/carousel/{uploaded['id']}")
        self.assertEqual(response.json(), {"message": "Deleted successfully"})
        self.assertEqual(self.client.get("/api/carousel").json(), [])
        self.assertEqual(os.listdir(self.upload_dir), [])


if __name__ == "__main__":
    unittest.main()
