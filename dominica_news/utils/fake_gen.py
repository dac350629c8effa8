from faker import Faker
from faker.providers import BaseProvider


class DominicaNewsProvider(BaseProvider):
    """
    Sample newsroom content for seeding
    Headlines mention real Dominican places so the demo feels local.
    """

    places = [
        'Roseau', 'Portsmouth', 'Marigot', 'Grand Bay', 'Soufrière',
        'Castle Bruce', 'Mahaut', 'La Plaine', 'Calibishie', 'Scotts Head'
    ]

    subjects = [
        'Farmers', 'Fishermen', 'Students', 'Tour operators', 'Local artisans',
        'Health workers', 'Cricket fans', 'Small businesses', 'Volunteers'
    ]

    actions = [
        'welcome new support programme', 'prepare for hurricane season',
        'celebrate record harvest', 'launch community clean-up',
        'receive solar energy grants', 'host regional festival',
        'open new training centre', 'mark Creole Day celebrations'
    ]

    def news_headline(self):
        return (f"{self.random_element(self.subjects)} in {self.random_element(self.places)} "
                f"{self.random_element(self.actions)}")

    def news_body(self, paragraphs=4):
        """HTML body, one <p> per paragraph"""
        return ''.join(f'<p>{self.generator.paragraph(nb_sentences=5)}</p>' for _ in range(paragraphs))

    def news_excerpt(self):
        return self.generator.sentence(nb_words=20)[:500]


# Faker instance used by the seed command
fake = Faker('en_US')
fake.add_provider(DominicaNewsProvider)
