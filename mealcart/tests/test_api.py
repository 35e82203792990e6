import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from mealcart.api.api_run import app
from mealcart.tests.test_recipe_import import JSONLD_PAGE, READ_PROXY_MARKDOWN

RECIPE = {
    "id": "tacos",
    "title": "Fish Tacos",
    "servings": 2,
    "ingredients": [{"name": "Cod", "qty": 1, "unit": "lb", "store": "Sprouts"}],
    "steps": ["Bake cod.", "Build tacos."],
}


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        patcher = mock.patch("mealcart.infra.State_Repository.STATE_FILE",
                             Path(self.tmp.name) / "state.json")
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.tmp.cleanup)


class TestStateAPI(ApiTestCase):

    def test_health(self):
        resp = self.client.get('/api/health')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_state_is_seeded(self):
        resp = self.client.get('/api/state')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(len(data['recipes']), 4)
        self.assertIn('weekPlan', data)
        self.assertEqual(data['stores'][-1], 'Unassigned')

    def test_put_state(self):
        resp = self.client.put('/api/state', json={"recipes": [RECIPE], "householdServings": 2})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['householdServings'], 2)
        self.assertEqual(self.client.get('/api/state').json()['recipes'][0]['id'], 'tacos')

    def test_put_invalid_state(self):
        resp = self.client.put('/api/state', json={"recipes": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['detail'], "State payload is invalid.")


class TestRecipesAPI(ApiTestCase):

    def test_create_list_update_delete(self):
        resp = self.client.post('/api/recipes', json=RECIPE)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['ingredients'][0]['name'], 'cod')

        ids = [r['id'] for r in self.client.get('/api/recipes').json()]
        self.assertIn('tacos', ids)

        resp = self.client.put('/api/recipes/tacos', json=dict(RECIPE, title="Shrimp Tacos"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['title'], 'Shrimp Tacos')

        resp = self.client.delete('/api/recipes/tacos')
        self.assertEqual(resp.json(), {"deleted": True, "id": "tacos"})

    def test_duplicate_id(self):
        self.client.post('/api/recipes', json=RECIPE)
        resp = self.client.post('/api/recipes', json=RECIPE)
        self.assertEqual(resp.status_code, 409)

    def test_invalid_recipe(self):
        resp = self.client.post('/api/recipes', json={"title": "No ingredients"})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_recipe(self):
        self.assertEqual(self.client.put('/api/recipes/missing', json=RECIPE).status_code, 404)
        self.assertEqual(self.client.delete('/api/recipes/missing').status_code, 404)

    def test_delete_clears_plan(self):
        first_id = self.client.get('/api/state').json()['recipes'][0]['id']
        self.client.delete(f'/api/recipes/{first_id}')
        monday = self.client.get('/api/state').json()['weekPlan']['Monday']
        self.assertEqual(monday['meals']['dinner'], {"mode": "skip", "recipeId": None, "servingsOverride": None})


class TestGroceriesAPI(ApiTestCase):

    def test_groceries(self):
        resp = self.client.get('/api/groceries')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(set(data), {'groups', 'text', 'count'})
        self.assertIn('Unassigned', data['groups'])
        self.assertGreater(data['count'], 0)
        self.assertIn("Trader Joe's In-Store Checklist", data['text'])

    def test_checklist_and_pdf(self):
        html = self.client.get('/api/groceries/checklist')
        self.assertEqual(html.status_code, 200)
        self.assertIn('text/html', html.headers['content-type'])
        self.assertIn('<h1>Grocery Checklist</h1>', html.text)

        pdf = self.client.get('/api/groceries/pdf')
        self.assertEqual(pdf.headers['content-type'], 'application/pdf')
        self.assertTrue(pdf.content.startswith(b'%PDF'))

    def test_week_balance(self):
        data = self.client.get('/api/week-balance').json()
        self.assertEqual(data['plannedMeals'], 7)
        self.assertEqual(data['planningDays'], 7)


class TestParseAPI(ApiTestCase):

    def test_parse_ingredients(self):
        resp = self.client.post('/api/ingredients/parse', json={
            "text": "2 eggs\nAdd to cart\nRice, 1, cup",
            "ingredientCatalog": {"rice": {"store": "Aldi"}},
        })
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual([i['name'] for i in data['ingredients']], ['eggs', 'rice'])
        self.assertEqual(data['ingredients'][1]['store'], 'Aldi')
        self.assertEqual(data['skippedLines'], ['Add to cart'])

    def test_import_rejects_bad_urls(self):
        for url in ("", "ftp://example.com/recipe", "http://localhost:3000/x", "http://192.168.1.4/x"):
            with self.subTest(url=url):
                resp = self.client.post('/api/import/parse', json={"url": url})
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()['detail'], "A valid recipe URL is required.")

    def test_import_without_content(self):
        with mock.patch("mealcart.api.routes.imports.fetch_recipe_sources",
                        new=mock.AsyncMock(return_value=[])):
            resp = self.client.post('/api/import/parse', json={"url": "example.com/salmon"})
        self.assertEqual(resp.status_code, 422)

    def test_import_picks_best_source(self):
        sources = [("direct", "<p>Enable JavaScript</p>"), ("read-proxy", READ_PROXY_MARKDOWN)]
        fetch = mock.AsyncMock(return_value=sources)
        with mock.patch("mealcart.api.routes.imports.fetch_recipe_sources", new=fetch):
            resp = self.client.post('/api/import/parse', json={"url": "example.com/pasta"})
        fetch.assert_awaited_once_with("https://example.com/pasta")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['source'], 'read-proxy')
        self.assertEqual(data['title'], 'Weeknight Pasta')
        self.assertEqual(data['sourceUrl'], 'https://example.com/pasta')
        self.assertEqual(data['steps'], ['Boil pasta.', 'Toss with olive oil.'])
        self.assertNotIn('id', data)

    def test_import_jsonld_page(self):
        fetch = mock.AsyncMock(return_value=[("direct", JSONLD_PAGE)])
        with mock.patch("mealcart.api.routes.imports.fetch_recipe_sources", new=fetch):
            resp = self.client.post('/api/import/parse', json={"url": "https://example.com/salmon"})
        self.assertEqual(resp.json()['title'], 'Lemon Salmon')
        self.assertEqual(resp.json()['source'], 'direct')


if __name__ == '__main__':
    unittest.main()
