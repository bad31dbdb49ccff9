"""Renderers and exporters for import trees and their layouts."""
