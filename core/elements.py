"""
Five-Element (Wuxing) cycle.

Elements are declared in generative order (Wood → Fire → Earth → Metal →
Water → Wood), so both cycles are ordinal arithmetic:

  generates(a) = a + 1  (mod 5)
  destroys(a)  = a + 2  (mod 5)   Wood→Earth, Earth→Water, Water→Fire, ...

The interaction table is asymmetric: the subject nourishing the
context scores differently from the context nourishing the subject.
"""
import config
from core.models import Element

_CYCLE = tuple(Element)

# year % 10 → (0-1, 2-3, 4-5, 6-7, 8-9)
_YEAR_ELEMENTS = (Element.METAL, Element.WATER, Element.WOOD, Element.FIRE, Element.EARTH)


def year_element(year: int) -> Element:
    """Element of a calendar year from its last digit."""
    return _YEAR_ELEMENTS[(year % 10) // 2]


def generates(element: Element) -> Element:
    return _CYCLE[(_CYCLE.index(element) + 1) % len(_CYCLE)]


def destroys(element: Element) -> Element:
    return _CYCLE[(_CYCLE.index(element) + 2) % len(_CYCLE)]


def element_interaction(subject: Element, context: Element) -> float:
    """
    Interaction of a subject element (the person) with a context element
    (the year):

      same                    →  1.0
      subject generates ctx   →  0.8
      ctx generates subject   →  0.6
      subject destroys ctx    → -0.5
      ctx destroys subject    → -0.8
    """
    if subject is context:
        return config.ELEMENT_SAME
    if generates(subject) is context:
        return config.ELEMENT_SUBJECT_GENERATES
    if generates(context) is subject:
        return config.ELEMENT_CONTEXT_GENERATES
    if destroys(subject) is context:
        return config.ELEMENT_SUBJECT_DESTROYS
    if destroys(context) is subject:
        return config.ELEMENT_CONTEXT_DESTROYS
    return config.ELEMENT_NEUTRAL
