"""Catalog of civilian/undercover word pairs.

Order matters: rooms remember which pairs they already played by index.
"""
from typing import List, NamedTuple, Sequence, Tuple


class WordPair(NamedTuple):
    civilian: str
    undercover: str

    def to_dict(self):
        return {'civilian': self.civilian, 'undercover': self.undercover}


WORD_PAIRS: Tuple[WordPair, ...] = (
    WordPair('McDonalds', 'Burger King'),
    WordPair('Whatsapp', 'Telegram'),
    WordPair('Brasil', 'Argentina'),
    WordPair('Futebol', 'Futsal'),
    WordPair('Cachorro', 'Lobo'),
    WordPair('Vampiro', 'Morcego'),
    WordPair('Harry Potter', 'Senhor dos Anéis'),
    # Hard: nuance and context
    WordPair('Jacaré', 'Crocodilo'),
    WordPair('Manteiga', 'Margarina'),
    WordPair('Laranja', 'Mexerica'),
    WordPair('Guarda-chuva', 'Sombrinha'),
    WordPair('Biscoito', 'Bolacha'),
    WordPair('Abelha', 'Vespa'),
    WordPair('Padaria', 'Confeitaria'),
    WordPair('Furacão', 'Tornado'),
    WordPair('Violão', 'Ukulele'),
    WordPair('Hotel', 'Pousada'),
    # Very hard: nearly identical function
    WordPair('Copo', 'Taça'),
    WordPair('Ketchup', 'Molho de Tomate'),
    WordPair('Rei', 'Imperador'),
    WordPair('Uber', 'Táxi'),
    WordPair('Colônia', 'Perfume'),
    # Pop culture
    WordPair('Homem-Aranha', 'Deadpool'),
    # Harry Potter is listed once, above; every index from here on is one
    # lower than in the first version of this list.
    WordPair('Instagram', 'TikTok'),
    WordPair('Notebook', 'Computador'),
    WordPair('Sapo', 'Perereca'),
    # Food and drink
    WordPair('Sushi', 'Sashimi'),
    WordPair('Macarrão', 'Lasanha'),
    WordPair('Limão', 'Lima'),
    WordPair('Vinho', 'Suco de Uva'),
    WordPair('Pão de Queijo', 'Chipa'),
    # Animals
    WordPair('Tartaruga', 'Jabuti'),
    WordPair('Camelo', 'Dromedário'),
    WordPair('Gato', 'Tigre'),
    WordPair('Rato', 'Hamster'),
    WordPair('Pinguim', 'Pato'),
    # Objects and technology
    WordPair('Fone de Ouvido', 'Headset'),
    WordPair('Ventilador', 'Ar Condicionado'),
    WordPair('Piano', 'Teclado'),
    WordPair('Escada', 'Elevador'),
    WordPair('Wi-Fi', '4G'),
    # Places and everyday life
    WordPair('Cinema', 'Teatro'),
    WordPair('Supermercado', 'Mercadinho'),
    WordPair('Piscina', 'Lago'),
    WordPair('Trovão', 'Relâmpago'),
    WordPair('Bombeiro', 'Policial'),
)


def find_catalog_problems(pairs: Sequence[WordPair]) -> List[str]:
    problems = []
    seen = set()
    for index, pair in enumerate(pairs):
        civilian = pair.civilian.strip().casefold()
        undercover = pair.undercover.strip().casefold()
        if not civilian or not undercover:
            problems.append(f'#{index}: blank term in {pair}')
        elif civilian == undercover:
            problems.append(f'#{index}: identical terms in {pair}')
        if (civilian, undercover) in seen:
            problems.append(f'#{index}: duplicate of an earlier pair {pair}')
        seen.add((civilian, undercover))
    return problems
