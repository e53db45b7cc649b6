import unittest
from datetime import time

from fastapi.testclient import TestClient
from sqlmodel import Session

from factories import (
    EVERY_DAY,
    WEEKDAYS,
    make_definition,
    make_engine,
    make_placement_group,
    make_store,
    make_store_schedule,
)
from signage.database import get_session
from signage.main import app


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        with Session(self.engine) as session:
            _, _, store = make_store(session)
            breakfast = make_definition(session, "breakfast", sort_order=1)
            lunch = make_definition(session, "lunch", sort_order=2)
            group = make_placement_group(session, store.id)
            weekday = make_store_schedule(session, breakfast, WEEKDAYS, time(6, 0), time(10, 30))
            daily_lunch = make_store_schedule(session, lunch, EVERY_DAY, time(11, 0), time(15, 0))

            self.store_id = store.id
            self.group_id = group.id
            self.breakfast_id = breakfast.id
            self.weekday_id = weekday.id
            self.daily_lunch_id = daily_lunch.id

        def session_override():
            with Session(self.engine) as session:
                yield session

        app.dependency_overrides[get_session] = session_override
        # no context manager: the lifespan would create tables on the real database
        self.client = TestClient(app)
        self.base = f"/placement-groups/{self.group_id}/schedules"

    def tearDown(self) -> None:
        app.dependency_overrides.clear()


class PlacementScheduleApiTests(ApiTestCase):
    def test_unknown_placement_group_is_404(self) -> None:
        response = self.client.get("/placement-groups/999/schedules/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Placement group 999 not found")

    def test_view_groups_inherited_schedules(self) -> None:
        response = self.client.get(f"{self.base}/")
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertEqual(body["store_id"], self.store_id)
        self.assertEqual([g["daypart_name"] for g in body["dayparts"]], ["breakfast", "lunch"])
        breakfast = body["dayparts"][0]
        self.assertFalse(breakfast["is_customized"])
        self.assertEqual(breakfast["inherited_regular"][0]["time_label"], "6:00 AM - 10:30 AM")

    def test_create_conflict_and_delete(self) -> None:
        payload = {"daypart_name": "breakfast", "days_of_week": [1, 2], "start_time": "07:00:00", "end_time": "10:00:00"}
        created = self.client.post(f"{self.base}/", json=payload)
        self.assertEqual(created.status_code, 201)
        override_id = created.json()["id"]

        conflict = self.client.post(f"{self.base}/", json={**payload, "days_of_week": [2, 3]})
        self.assertEqual(conflict.status_code, 409)
        self.assertEqual(conflict.json()["detail"]["conflicting_days"], [2])

        effective = self.client.get(f"{self.base}/effective").json()
        self.assertEqual([s["source"] for s in effective], ["placement", "store"])

        deleted = self.client.delete(f"{self.base}/{override_id}")
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(len(self.client.get(f"{self.base}/effective").json()), 2)

    def test_invalid_window_is_400(self) -> None:
        payload = {"daypart_name": "breakfast", "days_of_week": [1], "start_time": "10:00:00", "end_time": "09:00:00"}
        response = self.client.post(f"{self.base}/", json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "End time must be after start time")

    def test_malformed_recurrence_is_400(self) -> None:
        payload = {
            "daypart_name": "lunch",
            "days_of_week": [],
            "start_time": "00:00:00",
            "runs_on_days": False,
            "schedule_type": "event_holiday",
            "event_name": "New Year",
            "recurrence_type": "annual_date",
            "recurrence_config": {"month": 13, "day_of_month": 1},
        }
        response = self.client.post(f"{self.base}/", json=payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Recurrence needs a month between 1 and 12")
        self.assertEqual(self.client.get(f"{self.base}/").status_code, 200)

    def test_null_required_field_is_400(self) -> None:
        payload = {"daypart_name": "breakfast", "days_of_week": [1, 2], "start_time": "07:00:00", "end_time": "10:00:00"}
        override_id = self.client.post(f"{self.base}/", json=payload).json()["id"]

        response = self.client.patch(f"{self.base}/{override_id}", json={"start_time": None})
        self.assertEqual(response.status_code, 400)

        customize = self.client.post(
            f"{self.base}/inherited/{self.daily_lunch_id}/customize",
            json={"changes": {"days_of_week": None}},
        )
        self.assertEqual(customize.status_code, 400)

    def test_customize_inherited(self) -> None:
        response = self.client.post(
            f"{self.base}/inherited/{self.weekday_id}/customize",
            json={"changes": {"start_time": "07:30:00"}},
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()[0]["start_time"], "07:30:00")

        again = self.client.get(f"{self.base}/inherited/{self.weekday_id}/draft")
        self.assertEqual(again.status_code, 404)

    def test_replace_and_remaining_days(self) -> None:
        payload = [{"daypart_name": "breakfast", "days_of_week": WEEKDAYS, "start_time": "07:00:00"}]
        response = self.client.put(f"{self.base}/", json=payload)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 1)

        draft = self.client.get(f"{self.base}/remaining-days/breakfast")
        self.assertEqual(draft.json()["days_of_week"], [0, 6])
        self.assertEqual(self.client.get(f"{self.base}/remaining-days/lunch").status_code, 404)

    def test_collision_check(self) -> None:
        self.client.post(
            f"{self.base}/",
            json={"daypart_name": "lunch", "days_of_week": [3], "start_time": "11:00:00"},
        )
        result = self.client.post(f"{self.base}/collisions", json={"daypart_name": "lunch", "days_of_week": [3, 4]})
        self.assertEqual(result.json()["conflicting_days"], [3])


class StoreAndHolidayApiTests(ApiTestCase):
    def test_store_dayparts(self) -> None:
        response = self.client.get(f"/stores/{self.store_id}/dayparts")
        self.assertEqual([d["daypart_name"] for d in response.json()], ["breakfast", "lunch"])
        self.assertEqual(self.client.get("/stores/999/dayparts").status_code, 404)

    def test_store_schedule_conflict(self) -> None:
        payload = {"daypart_definition_id": self.breakfast_id, "days_of_week": [5, 6], "start_time": "06:00:00"}
        response = self.client.post(f"/stores/{self.store_id}/schedules", json=payload)
        self.assertEqual(response.status_code, 409)

        payload["days_of_week"] = [0, 6]
        self.assertEqual(self.client.post(f"/stores/{self.store_id}/schedules", json=payload).status_code, 201)
        self.assertEqual(len(self.client.get(f"/stores/{self.store_id}/schedules").json()), 3)

    def test_holiday_templates(self) -> None:
        federal = self.client.get("/holiday-templates/", params={"category": "federal"}).json()
        self.assertTrue(federal)
        self.assertTrue(all(t["category"] == "federal" for t in federal))

        draft = self.client.get("/holiday-templates/thanksgiving/draft", params={"daypart_name": "lunch"})
        self.assertEqual(draft.json()["runs_on_days"], False)
        self.assertEqual(self.client.get("/holiday-templates/nope/draft?daypart_name=lunch").status_code, 404)


if __name__ == "__main__":
    unittest.main()
