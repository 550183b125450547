"""GraphQL documents for the knowledge graph."""

_PLACE_FIELDS = """
        id
        name
        type
        dimension
"""

_CHARACTER_FIELDS = f"""
      id
      name
      status
      species
      type
      gender
      image
      origin {{{_PLACE_FIELDS}      }}
      location {{{_PLACE_FIELDS}      }}
      episode {{
        id
        name
        episode
        air_date
      }}
"""

_RESIDENT_FIELDS = """
        id
        name
        status
        species
        type
        gender
        origin { name }
        location { name }
"""

_LOCATION_FIELDS = f"""
      id
      name
      type
      dimension
      residents {{{_RESIDENT_FIELDS}      }}
"""

_PAGE_INFO = """
      info {
        count
        pages
        next
        prev
      }
"""

GET_CHARACTER = f"""
query GetCharacter($id: ID!) {{
  character(id: $id) {{{_CHARACTER_FIELDS}  }}
}}
"""

GET_LOCATION = f"""
query GetLocation($id: ID!) {{
  location(id: $id) {{{_LOCATION_FIELDS}  }}
}}
"""

LIST_CHARACTERS = f"""
query ListCharacters($page: Int!) {{
  characters(page: $page) {{{_PAGE_INFO}
    results {{{_CHARACTER_FIELDS}    }}
  }}
}}
"""

LIST_LOCATIONS = f"""
query ListLocations($page: Int!) {{
  locations(page: $page) {{{_PAGE_INFO}
    results {{{_LOCATION_FIELDS}    }}
  }}
}}
"""
